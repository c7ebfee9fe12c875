# socialboard/conftest.py
"""
공용 pytest 픽스처.

실제 Firestore 대신 메모리 기반 테스트 더블(FakeFirestore)을 주입합니다.
- 컬렉션 / 문서 / FieldFilter('==') 조회
- on_snapshot 구독 (문서 변경 시 즉시 콜백)
- 낙관적 트랜잭션 (읽은 문서가 커밋 전에 바뀌면 재시도)
- 오래된 스냅샷 재생(serve_stale_reads)으로 동시 투표 상황을 결정적으로 재현
"""

import copy
import threading
import uuid

import pytest
from firebase_admin import auth as firebase_auth
from firebase_admin import firestore
from google.api_core import exceptions as google_exceptions

from socialboard import create_app

MAX_TRANSACTION_ATTEMPTS = 5


class FakeDocumentSnapshot:
    def __init__(self, reference, data, version):
        self.reference = reference
        self.id = reference.id
        self._data = copy.deepcopy(data)
        self._version = version

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data)

    def get(self, field_path):
        return (self._data or {}).get(field_path)


class FakeWatch:
    """on_snapshot 이 반환하는 구독 핸들"""
    def __init__(self, db, collection, callback):
        self._db = db
        self.collection = collection
        self._callback = callback
        self.active = True

    def deliver(self):
        if self.active:
            self._callback(self.collection.snapshots(), [], None)

    def unsubscribe(self):
        self.active = False
        with self._db._lock:
            if self in self._db._watches:
                self._db._watches.remove(self)


class FakeDocumentReference:
    def __init__(self, db, path: str):
        self._db = db
        self.path = path
        self.id = path.rsplit('/', 1)[-1]

    def get(self, transaction=None):
        snapshot = self._db._read(self)
        if transaction is not None:
            transaction._record_read(snapshot)
        return snapshot

    def set(self, document_data, merge=False):
        self._db._write(self.path, document_data, merge=merge)

    def update(self, field_updates):
        self._db._write(self.path, field_updates, must_exist=True, merge=True)

    def delete(self):
        self._db._write(self.path, None)

    def collection(self, collection_id: str):
        return FakeCollectionReference(self._db, f"{self.path}/{collection_id}")


class FakeQuery:
    def __init__(self, collection, filters=None):
        self._collection = collection
        self._filters = list(filters or [])

    def where(self, field_path=None, op_string=None, value=None, *, filter=None):
        if filter is not None:
            field_path, op_string, value = filter.field_path, filter.op_string, filter.value
        if op_string != '==':
            raise NotImplementedError(f"FakeQuery 는 '==' 조건만 지원합니다: {op_string}")
        return FakeQuery(self._collection, self._filters + [(field_path, value)])

    def stream(self):
        self._collection._db._check_available()
        for snapshot in self._collection.snapshots():
            data = snapshot.to_dict()
            if all(data.get(field_path) == value for field_path, value in self._filters):
                yield snapshot

    def get(self):
        return list(self.stream())


class FakeCollectionReference(FakeQuery):
    def __init__(self, db, path: str):
        super().__init__(self)
        self._db = db
        self.path = path
        self.id = path.rsplit('/', 1)[-1]

    def document(self, document_id=None):
        return FakeDocumentReference(self._db, f"{self.path}/{document_id or uuid.uuid4().hex[:20]}")

    def snapshots(self):
        return [self._db._read(FakeDocumentReference(self._db, path)) for path in self._db._children(self.path)]

    def on_snapshot(self, callback):
        watch = FakeWatch(self._db, self, callback)
        with self._db._lock:
            self._db._watches.append(watch)
        watch.deliver()
        return watch


class FakeTransaction:
    """
    읽은 문서의 버전을 기록해 두었다가 커밋 시점에 비교합니다.
    버전이 바뀌었으면 커밋하지 않고 False 를 반환합니다. (fake_transactional 이 재시도)
    """
    def __init__(self, db):
        self._db = db
        self._read_versions = {}
        self._writes = []
        self.attempts = 0

    def _begin(self):
        self._read_versions.clear()
        self._writes.clear()
        self.attempts += 1

    def _record_read(self, snapshot):
        self._read_versions.setdefault(snapshot.reference.path, snapshot._version)

    def update(self, reference, field_updates):
        self._writes.append((reference.path, field_updates, True, True))

    def set(self, reference, document_data, merge=False):
        self._writes.append((reference.path, document_data, False, merge))

    def delete(self, reference):
        self._writes.append((reference.path, None, False, False))

    def _commit(self) -> bool:
        with self._db._lock:
            for path, version in self._read_versions.items():
                if self._db._versions.get(path, 0) != version:
                    return False
            touched = [self._db._store(path, data, must_exist, merge) for path, data, must_exist, merge in self._writes]
        for path in touched:
            self._db._notify(path)
        return True


def fake_transactional(to_wrap):
    """firestore.transactional 대체. 충돌 시 처음부터 다시 실행합니다."""
    def wrapper(transaction, *args, **kwargs):
        for _ in range(MAX_TRANSACTION_ATTEMPTS):
            transaction._begin()
            result = to_wrap(transaction, *args, **kwargs)
            if transaction._commit():
                return result
        raise google_exceptions.Aborted("트랜잭션 충돌이 계속됩니다.")
    return wrapper


class FakeFirestore:
    def __init__(self):
        self._lock = threading.RLock()
        self._documents = {}
        self._versions = {}
        self._watches = []
        self._stale_reads = {}
        self.fail_with = None  # 설정하면 모든 읽기/쓰기가 이 예외를 던짐

    # --- 클라이언트 API ---
    def collection(self, path: str):
        return FakeCollectionReference(self, path)

    def document(self, path: str):
        return FakeDocumentReference(self, path)

    def transaction(self):
        return FakeTransaction(self)

    # --- 테스트 보조 ---
    def serve_stale_reads(self, reference, count: int = 1):
        """현재 스냅샷을 저장해 두고, 다음 count 번의 읽기에 그대로 돌려줍니다."""
        snapshot = self._read(reference)
        with self._lock:
            self._stale_reads[reference.path] = [snapshot, count]

    def active_watch_paths(self):
        with self._lock:
            return sorted(watch.collection.path for watch in self._watches)

    # --- 내부 구현 ---
    def _check_available(self):
        if self.fail_with is not None:
            raise self.fail_with

    def _children(self, collection_path: str):
        with self._lock:
            return sorted(path for path in self._documents if path.rsplit('/', 1)[0] == collection_path)

    def _read(self, reference):
        self._check_available()
        with self._lock:
            stale = self._stale_reads.get(reference.path)
            if stale and stale[1] > 0:
                stale[1] -= 1
                return stale[0]
            return FakeDocumentSnapshot(reference, self._documents.get(reference.path),
                                        self._versions.get(reference.path, 0))

    def _store(self, path, data, must_exist=False, merge=False):
        if must_exist and path not in self._documents:
            raise google_exceptions.NotFound(f"No document to update: {path}")
        if data is None:
            self._documents.pop(path, None)
        elif merge and path in self._documents:
            self._documents[path] = {**self._documents[path], **copy.deepcopy(data)}
        else:
            self._documents[path] = copy.deepcopy(data)
        self._versions[path] = self._versions.get(path, 0) + 1
        return path

    def _write(self, path, data, must_exist=False, merge=False):
        self._check_available()
        with self._lock:
            self._store(path, data, must_exist, merge)
        self._notify(path)

    def _notify(self, path):
        collection_path = path.rsplit('/', 1)[0]
        with self._lock:
            watches = [watch for watch in self._watches if watch.collection.path == collection_path]
        for watch in watches:
            watch.deliver()


@pytest.fixture
def fake_db(monkeypatch):
    monkeypatch.setattr(firestore, "transactional", fake_transactional)
    return FakeFirestore()


@pytest.fixture
def app(fake_db):
    return create_app('testing', db=fake_db)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def fake_id_tokens(monkeypatch):
    """
    Firebase ID 토큰 검증을 대체합니다.
    토큰 형식: '<uid>:<표시 이름>' (이름이 없으면 익명 로그인), 'invalid' 는 검증 실패.
    """
    def _verify(id_token, check_revoked=False):
        if id_token == 'invalid':
            raise firebase_auth.InvalidIdTokenError("잘못된 토큰")
        uid, _, name = id_token.partition(':')
        provider = 'google.com' if name else 'anonymous'
        return {'uid': uid, 'name': name or None, 'firebase': {'sign_in_provider': provider}}

    monkeypatch.setattr(firebase_auth, "verify_id_token", _verify)


@pytest.fixture
def sign_in(client, fake_id_tokens):
    """로그인 후 Authorization 헤더를 반환하는 헬퍼"""
    def _sign_in(uid: str, name: str = 'Tester'):
        response = client.post('/api/auth/session', json={'id_token': f"{uid}:{name}"})
        assert response.status_code == 200, response.get_json()
        return {'Authorization': f"Bearer {response.get_json()['access_token']}"}
    return _sign_in
