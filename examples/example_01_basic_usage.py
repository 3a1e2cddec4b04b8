"""Example 01: Basic Usage - tablemap Fundamentals.

This example demonstrates the fundamental operations:
- Declaring records with Field[T] annotations and column options
- Registering record types with a Mapper over a DB-API connection
- insert / update / delete with engine-managed id and timestamps
- select_by_id, select_all and custom named-parameter queries
"""

import sqlite3

from tablemap import SQLITE, DBAPIClient, Field, Mapper, Record, RecordList, Scalar


# Step 1: Define Record Types
# Every mapped record needs exactly one field with the "id" option.
# "auto" columns are filled in by the database and skipped on insert.
class Author(Record):
    """An author stored in the authors table."""

    id: Field[int] = Field(options="id,auto")
    name: Field[str]
    created: Field[int] = Field(options="created")
    modified: Field[int] = Field(options="modified")


class Book(Record):
    id: Field[int] = Field(options="id,auto")
    author_id: Field[int] = Field(column="author")
    title: Field[str]
    rating: Field[float] = 0.0


SCHEMA = """
CREATE TABLE authors (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    created INTEGER NOT NULL,
    modified INTEGER NOT NULL
);
CREATE TABLE books (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    author INTEGER NOT NULL,
    title TEXT NOT NULL,
    rating REAL NOT NULL
);
"""


def main():
    # Step 2: Connect and register
    # The mapper expects an autocommit connection.
    conn = sqlite3.connect(":memory:", isolation_level=None)
    conn.executescript(SCHEMA)

    mapper = Mapper(DBAPIClient(conn), SQLITE)
    mapper.register(Author, "authors")
    mapper.register(Book, "books")

    # Step 3: Insert
    # The generated id and both timestamps are written back to the record.
    author = Author(name="Ursula")
    mapper.insert(author)
    print(f"Inserted {author}")

    for title, rating in [("The Dispossessed", 4.5), ("The Lathe of Heaven", 4.0)]:
        mapper.insert(Book(author_id=author.id, title=title, rating=rating))

    # Step 4: Update and reload
    author.name = "Ursula K. Le Guin"
    print(f"Updated rows: {mapper.update(author)}")

    loaded = Author()
    mapper.select_by_id(loaded, author.id)
    print(f"Loaded {loaded}")

    # Step 5: Collections and custom queries
    books = RecordList(Book)
    mapper.select_by(books, "author", author.id)
    for book in books:
        print(f"  {book.title} ({book.rating})")

    with mapper.prepare("SELECT count(*) FROM books WHERE rating >= :min") as stmt:
        count = Scalar(int)
        stmt.query(count, {"min": 4.2})
        print(f"Books rated 4.2 or more: {count.value}")

    # Step 6: Delete
    print(f"Deleted rows: {mapper.delete(books[0])}")

    mapper.close()
    conn.close()


if __name__ == "__main__":
    main()
