import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./seniku.db")

if not DATABASE_URL.startswith("sqlite:///"):
    print("Error: reset_db only works with a local SQLite DATABASE_URL.")
    print("For other databases run `alembic downgrade base` instead.")
    exit(1)

# Relative SQLite paths resolve against the directory the app is started from
db_relative_path = DATABASE_URL.split('///')[1]
db_file_path = os.path.join(os.getcwd(), db_relative_path)

if os.path.exists(db_file_path):
    try:
        os.remove(db_file_path)
        print(f"Deleted SeniKu database file: {db_file_path}")
    except OSError as e:
        print(f"Error deleting file {db_file_path}: {e}")
        exit(1)
else:
    print(f"Database file not found at {db_file_path}. Nothing to delete.")

print("Run `python seed_db.py` to recreate the schema with demo data.")
