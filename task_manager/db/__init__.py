from task_manager.db.base import Base, SessionLocal, engine

__all__ = ["Base", "SessionLocal", "engine"]
