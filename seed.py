import logging
from app.core.database import SessionLocal, create_database_tables
from app.models.student import Student

# Setup logging to see output
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SAMPLE_STUDENTS = [
    {"name": "Ali Khan", "age": 20, "email": "ali@example.com"},
    {"name": "Sara Ahmed", "age": 21, "email": "sara@example.com"},
    {"name": "Omar Farooq", "age": 22, "email": "omar@example.com"},
]


def seed_data(session_factory=SessionLocal) -> int:
    """
    Insert sample students when the table is empty.
    Returns the number of rows inserted.
    """
    db = session_factory()
    try:
        # Skip if data already exists to avoid duplicates
        if db.query(Student).first():
            logger.info("Database already contains data. Skipping seed.")
            return 0

        logger.info("Seeding data...")
        db.add_all([Student(**data) for data in SAMPLE_STUDENTS])
        db.commit()

        logger.info(f"Seeded {len(SAMPLE_STUDENTS)} students")
        return len(SAMPLE_STUDENTS)

    except Exception as e:
        logger.error(f"Error seeding data: {e}")
        db.rollback()
        raise
    finally:
        db.close()  # Always close the connection


if __name__ == "__main__":
    create_database_tables()
    seed_data()
