from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from b1dialog.db import make_engine
from b1dialog.main import create_app
from b1dialog.settings import Settings
from b1dialog.store import RecordStore


class FakeGenerator:
	configured = True

	def __init__(self, error=None):
		self.calls = []
		self.error = error

	async def generate(self, system_persona, user_prompt, temperature):
		self.calls.append({"system": system_persona, "prompt": user_prompt, "temperature": temperature})
		if self.error is not None:
			raise self.error
		return f"  Summary #{len(self.calls)}\n"


class FakeClock:
	def __init__(self, start=datetime(2024, 5, 1, 9, 0, 0)):
		self.now = start

	def __call__(self):
		return self.now

	def advance(self, seconds):
		self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def database_url(tmp_path):
	return f"sqlite:///{tmp_path / 'b1dialog-test.db'}"


@pytest.fixture
def store(database_url):
	s = RecordStore(make_engine(database_url))
	s.create_schema()
	yield s
	s.dispose()


@pytest.fixture
def generator():
	return FakeGenerator()


@pytest.fixture
def clock():
	return FakeClock()


@pytest.fixture
def make_client(database_url, store, generator, clock):
	def _make(mode="workflow", **kwargs):
		cfg = Settings(database_url=database_url, b1_results_mode=mode, gemini_api_key=None)
		app = create_app(cfg, store=store, generator=kwargs.get("generator", generator))
		app.state.workflow.clock = clock
		return TestClient(app, raise_server_exceptions=False)

	return _make


@pytest.fixture
def client(make_client):
	return make_client()
