from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from task_assignees.core.config import DATABASE_URL

if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL nao configurada. Defina a variavel de ambiente antes de iniciar a API.")

engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    # Conexões do pool são usadas pelas threads das requisições
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
