# (c) Copyright Datacraft, 2026
from functools import lru_cache
from sqlalchemy import create_engine, Engine
from sqlalchemy.pool import NullPool
from sqlalchemy.orm import sessionmaker

from passkey_auth.config import get_settings


@lru_cache()
def get_engine() -> Engine:
    settings = get_settings()
    return create_engine(str(settings.db_url), poolclass=NullPool)


@lru_cache()
def get_sessionmaker() -> sessionmaker:
    return sessionmaker(get_engine(), expire_on_commit=False)
