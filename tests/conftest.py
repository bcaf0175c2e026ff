import os

import pytest
from bson import ObjectId

# settings são lidos no import de app.config
os.environ.setdefault("AUTH_BASE_URL", "http://auth:8000")
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")

from fakes import ALICE_ID, BOB_ID, InMemoryUserRepo, InMemoryVideoRepo, make_video  # noqa: E402


@pytest.fixture
def users():
    return [
        {"_id": ALICE_ID, "username": "alice", "fullname": "Alice A", "avatar": "http://img/alice.png",
         "email": "alice@example.com", "password": "hash"},
        {"_id": BOB_ID, "username": "bob", "fullname": "Bob B", "avatar": "http://img/bob.png",
         "email": "bob@example.com", "password": "hash"},
    ]


@pytest.fixture
def videos():
    return [
        make_video("Alpha", ALICE_ID, views=30, minutes=1, description="first upload"),
        make_video("beta", ALICE_ID, views=10, minutes=2, description="tutorial"),
        make_video("Gamma", BOB_ID, views=20, minutes=3, description="Cooking show"),
        # dono apagado: continua na listagem, só sem owner
        make_video("Orphan", ObjectId("64b0000000000000000000ee"), views=5, minutes=4, description="lost"),
    ]


@pytest.fixture
def video_repo(videos, users):
    return InMemoryVideoRepo(videos, users)


@pytest.fixture
def user_repo(users):
    return InMemoryUserRepo(users)
