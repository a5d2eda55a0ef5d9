"""Student endpoints and store when records live in process memory."""

import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from app.core.exceptions import DuplicateEmailException, StudentNotFoundException
from app.schemas.student import StudentCreate, StudentUpdate
from app.services.student.memory import InMemoryStudentStore


def test_root_reports_memory_storage(memory_client):
    assert memory_client.get("/").json()["storage"] == "memory"


def test_health_without_database(memory_client):
    resp = memory_client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy", "storage": "memory"}


def test_created_record_is_listed_and_fetchable(memory_client, sample_student):
    created = memory_client.post("/students", json=sample_student)
    assert created.status_code == 201
    assert created.json() == {"id": 1, **sample_student}

    assert memory_client.get("/students").json() == [created.json()]
    assert memory_client.get("/students/1").json() == created.json()


def test_missing_record_is_404(memory_client):
    resp = memory_client.get("/students/999")
    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "Student not found"


def test_list_count_matches_creates(memory_client):
    for i in range(7):
        memory_client.post("/students", json={"name": f"S{i}", "age": 18, "email": f"s{i}@example.com"})
    assert len(memory_client.get("/students").json()) == 7


def test_update_replaces_fields(memory_client, sample_student):
    memory_client.post("/students", json=sample_student)
    new_values = {"name": "Sara Ahmed", "age": 33, "email": "sara@example.com"}
    resp = memory_client.put("/students/1", json=new_values)
    assert resp.status_code == 200
    assert memory_client.get("/students/1").json() == {"id": 1, **new_values}


def test_update_and_delete_missing_are_404(memory_client, sample_student):
    assert memory_client.put("/students/5", json=sample_student).status_code == 404
    assert memory_client.delete("/students/5").status_code == 404


def test_delete_then_get_is_404(memory_client, sample_student):
    memory_client.post("/students", json=sample_student)
    resp = memory_client.delete("/students/1")
    assert resp.json() == {"message": "Student deleted successfully", "id": 1}
    assert memory_client.get("/students/1").status_code == 404


def test_duplicate_email_rejected(memory_client, sample_student):
    memory_client.post("/students", json=sample_student)
    resp = memory_client.post("/students", json=sample_student)
    assert resp.status_code == 400


def test_restart_starts_empty(memory_client_factory, memory_client, sample_student):
    memory_client.post("/students", json=sample_student)

    restarted = memory_client_factory(InMemoryStudentStore())
    assert restarted.get("/students").json() == []
    assert restarted.get("/students/1").status_code == 404


# --- store ---

def test_store_ids_are_never_reused():
    store = InMemoryStudentStore()
    first = store.create_student(StudentCreate(name="A", age=20, email="a@example.com"))
    store.delete_student(first.id)
    second = store.create_student(StudentCreate(name="B", age=21, email="b@example.com"))
    assert second.id == first.id + 1


def test_store_seeded_from_iterable():
    store = InMemoryStudentStore([
        StudentCreate(name="A", age=20, email="a@example.com"),
        StudentCreate(name="B", age=21, email="b@example.com"),
    ])
    assert store.count() == 2
    assert store.get_student_by_email("b@example.com").id == 2


def test_store_list_window():
    store = InMemoryStudentStore(
        StudentCreate(name=f"S{i}", age=20, email=f"s{i}@example.com") for i in range(5)
    )
    assert [s.id for s in store.list_students(skip=3)] == [4, 5]
    assert [s.id for s in store.list_students(skip=1, limit=2)] == [2, 3]


def test_store_update_missing_raises_not_found():
    store = InMemoryStudentStore()
    with pytest.raises(StudentNotFoundException):
        store.update_student(1, StudentUpdate(name="A", age=20, email="a@example.com"))


def test_store_update_after_delete_raises_not_found():
    store = InMemoryStudentStore([StudentCreate(name="A", age=20, email="a@example.com")])
    store.delete_student(1)
    with pytest.raises(StudentNotFoundException):
        store.update_student(1, StudentUpdate(name="A", age=21, email="a@example.com"))
    with pytest.raises(StudentNotFoundException):
        store.delete_student(1)


def test_store_update_to_taken_email_raises():
    store = InMemoryStudentStore([
        StudentCreate(name="A", age=20, email="a@example.com"),
        StudentCreate(name="B", age=21, email="b@example.com"),
    ])
    with pytest.raises(DuplicateEmailException):
        store.update_student(2, StudentUpdate(name="B", age=21, email="a@example.com"))
    assert store.get_student(2).email == "b@example.com"


def test_concurrent_creates_with_same_email_keep_one(monkeypatch):
    store = InMemoryStudentStore()
    find_by_email = store._find_by_email

    def slow_find_by_email(email):
        # Widen the window between the uniqueness check and the append
        time.sleep(0.01)
        return find_by_email(email)

    monkeypatch.setattr(store, "_find_by_email", slow_find_by_email)
    payload = StudentCreate(name="Ali Khan", age=20, email="ali@example.com")

    def attempt(_):
        try:
            store.create_student(payload)
            return 201
        except DuplicateEmailException:
            return 400

    with ThreadPoolExecutor(max_workers=8) as pool:
        codes = list(pool.map(attempt, range(8)))

    assert sorted(codes) == [201] + [400] * 7
    assert store.count() == 1


def test_concurrent_posts_over_http_keep_emails_unique(memory_client, memory_store, sample_student):
    with ThreadPoolExecutor(max_workers=8) as pool:
        codes = list(pool.map(
            lambda _: memory_client.post("/students", json=sample_student).status_code,
            range(8),
        ))

    assert sorted(codes) == [201] + [400] * 7
    assert memory_store.count() == 1


def test_store_clear_resets_ids():
    store = InMemoryStudentStore([StudentCreate(name="A", age=20, email="a@example.com")])
    store.clear()
    assert store.count() == 0
    assert store.create_student(StudentCreate(name="B", age=20, email="b@example.com")).id == 1
