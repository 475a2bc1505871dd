from __future__ import annotations
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base


Base = declarative_base()


def resolve_database_url(database_url: str, password: Optional[str] = None) -> str:
	url = make_url(database_url)
	# Credential from the environment only fills a URL that has none
	if password and url.password is None and not url.drivername.startswith("sqlite"):
		url = url.set(password=password)
	return url.render_as_string(hide_password=False)


def make_engine(database_url: str, password: Optional[str] = None) -> Engine:
	url = resolve_database_url(database_url, password)
	connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
	# pool_pre_ping avoids stale connections on hosted Postgres
	return create_engine(url, connect_args=connect_args, pool_pre_ping=True, future=True)
