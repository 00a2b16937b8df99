import aiosqlite
import uuid
import time
from app.core.config import settings

def _db_path() -> str:
    return settings.DATABASE_PATH

async def init_db():
    async with aiosqlite.connect(_db_path()) as db:
        await db.execute("""
            CREATE TABLE IF NOT EXISTS threads (
                id TEXT PRIMARY KEY, title TEXT, created_at REAL, updated_at REAL
            )
        """)
        await db.execute("""
            CREATE TABLE IF NOT EXISTS messages (
                id TEXT PRIMARY KEY, thread_id TEXT, role TEXT, content TEXT, timestamp REAL
            )
        """)
        await db.execute("CREATE INDEX IF NOT EXISTS idx_messages_thread ON messages (thread_id, timestamp)")
        await db.commit()

async def create_thread(thread_id: str, title: str):
    now = time.time()
    async with aiosqlite.connect(_db_path()) as db:
        await db.execute("INSERT OR IGNORE INTO threads (id, title, created_at, updated_at) VALUES (?, ?, ?, ?)",
                         (thread_id, title, now, now))
        await db.commit()

async def thread_exists(thread_id: str) -> bool:
    async with aiosqlite.connect(_db_path()) as db:
        async with db.execute("SELECT 1 FROM threads WHERE id = ?", (thread_id,)) as cursor:
            return await cursor.fetchone() is not None

async def save_message(thread_id: str, role: str, content: str):
    now = time.time()
    async with aiosqlite.connect(_db_path()) as db:
        await db.execute("INSERT INTO messages (id, thread_id, role, content, timestamp) VALUES (?, ?, ?, ?, ?)",
                         (str(uuid.uuid4()), thread_id, role, content, now))
        await db.execute("UPDATE threads SET updated_at = ? WHERE id = ?", (now, thread_id))
        await db.commit()

async def get_thread_messages(thread_id: str):
    async with aiosqlite.connect(_db_path()) as db:
        # rowid breaks ties between messages saved within the same clock tick
        async with db.execute(
            "SELECT role, content, timestamp FROM messages WHERE thread_id = ? ORDER BY timestamp ASC, rowid ASC",
            (thread_id,)
        ) as cursor:
            rows = await cursor.fetchall()
            return [{"role": row[0], "content": row[1], "timestamp": row[2]} for row in rows]

async def list_threads():
    async with aiosqlite.connect(_db_path()) as db:
        async with db.execute("SELECT id, title, updated_at FROM threads ORDER BY updated_at DESC") as cursor:
            rows = await cursor.fetchall()
            return [{"thread_id": row[0], "title": row[1], "updated_at": row[2]} for row in rows]

async def delete_thread(thread_id: str) -> bool:
    async with aiosqlite.connect(_db_path()) as db:
        cursor = await db.execute("DELETE FROM threads WHERE id = ?", (thread_id,))
        deleted = cursor.rowcount > 0
        await db.execute("DELETE FROM messages WHERE thread_id = ?", (thread_id,))
        await db.commit()
        return deleted
