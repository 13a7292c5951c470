from __future__ import annotations

import io
from pathlib import Path

import pytest

from dtasdk.credentials import (
    CREDENTIALS_FILE_ENV,
    CredentialStore,
    load_default_store,
    parse_credentials,
)
from dtasdk.errors import (
    CredentialNotFoundError,
    InvalidArgumentError,
    InvalidCredentialFormatError,
)
from dtasdk.types import Credential

KEYS = [
    "69b2048d-8bf8-4c1c-b49d-e6114897a9a5",
    "dce53190-1f70-4206-ad28-0e1ab3683161",
    "f0a2586d-24ea-432f-a833-2da18f15ebd4",
    "eb3ce251-ef76-48ee-abb0-5886b1a3dfa0",
    "7568ccc2-9881-4468-ad73-025d16f0662e",
    "5de206ab-3a06-4354-a9a4-bfd6efee8027",
]
INVALID_KEY = "871dbe31-3b46-4ca5-b9a2-8ad78eac4a4f"

VALID_CONTENTS = f"{KEYS[0]} {KEYS[1]}\n{KEYS[2]} {KEYS[3]}\n\n{KEYS[4]} {KEYS[5]}\n\n"
INVALID_CONTENTS = f"{KEYS[0]}{KEYS[1]}\n{KEYS[2]} {KEYS[3]}\n{KEYS[4]} {KEYS[5]}\n\n"


def _assert_correct_credentials(store: CredentialStore) -> None:
    for secret_key, public_key in zip(KEYS[0::2], KEYS[1::2]):
        assert store.get(public_key).secret_key == secret_key
        assert store.get(public_key).public_key == public_key
    assert len(store) == 3


def test_load_from_path(tmp_path: Path) -> None:
    path = tmp_path / "valid.txt"
    path.write_text(VALID_CONTENTS, encoding="utf-8")
    store = CredentialStore()
    store.load_from_path(path)

    _assert_correct_credentials(store)


def test_load_from_text_stream() -> None:
    store = CredentialStore()
    store.load_from_stream(io.StringIO(VALID_CONTENTS))

    _assert_correct_credentials(store)


def test_load_from_binary_stream_with_crlf() -> None:
    store = CredentialStore()
    store.load_from_stream(io.BytesIO(VALID_CONTENTS.replace("\n", "\r\n").encode("utf-8")))

    _assert_correct_credentials(store)


def test_load_from_text() -> None:
    store = CredentialStore()
    store.load_from_text(VALID_CONTENTS)

    _assert_correct_credentials(store)


def test_tokens_split_on_whitespace_runs() -> None:
    credentials = parse_credentials("  secret \t public  extra\n")

    assert credentials == [Credential(secret_key="secret", public_key="public")]


def test_get_unknown_credential() -> None:
    store = CredentialStore()
    store.load_from_text(VALID_CONTENTS)

    with pytest.raises(CredentialNotFoundError):
        store.get(INVALID_KEY)
    with pytest.raises(KeyError):
        store[INVALID_KEY]
    assert store.try_get(INVALID_KEY) is None


def test_invalid_file(tmp_path: Path) -> None:
    path = tmp_path / "invalid.txt"
    path.write_text(INVALID_CONTENTS, encoding="utf-8")
    store = CredentialStore()

    with pytest.raises(InvalidCredentialFormatError, match="line 1"):
        store.load_from_path(path)
    assert len(store) == 0


@pytest.mark.parametrize("contents", ["", "   \n\r\n  "])
def test_empty_contents(contents: str) -> None:
    with pytest.raises(InvalidCredentialFormatError):
        CredentialStore().load_from_text(contents)


def test_missing_path(tmp_path: Path) -> None:
    with pytest.raises(InvalidArgumentError):
        CredentialStore().load_from_path(tmp_path / "missing.txt")


def test_none_stream() -> None:
    with pytest.raises(InvalidArgumentError):
        CredentialStore().load_from_stream(None)


def test_duplicate_public_key_last_write_wins() -> None:
    store = CredentialStore()
    store.load_from_text("first KEYID\nsecond KEYID\n")
    assert store.get("KEYID").secret_key == "second"

    store.add(Credential(secret_key="third", public_key="KEYID"))
    assert store.get("KEYID").secret_key == "third"
    assert len(store) == 1


def test_add_remove_and_contains() -> None:
    store = CredentialStore([Credential(secret_key="s", public_key="p")])
    assert "p" in store
    assert store.public_keys() == ["p"]

    store.remove("p")
    store.remove("p")
    assert "p" not in store


@pytest.mark.parametrize("secret_key,public_key", [("", "p"), ("s", ""), (None, "p")])
def test_credential_rejects_empty_fields(secret_key, public_key) -> None:
    with pytest.raises(InvalidArgumentError):
        Credential(secret_key=secret_key, public_key=public_key)


def test_credential_repr_hides_secret() -> None:
    assert "SECRETKEY" not in repr(Credential(secret_key="SECRETKEY", public_key="KEYID"))


def test_load_default_store_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "credentials.txt"
    path.write_text(VALID_CONTENTS, encoding="utf-8")
    monkeypatch.setenv(CREDENTIALS_FILE_ENV, str(path))

    _assert_correct_credentials(load_default_store())


def test_load_default_store_without_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CREDENTIALS_FILE_ENV, raising=False)

    with pytest.raises(InvalidArgumentError):
        load_default_store()


def test_load_from_path_strips_byte_order_mark(tmp_path: Path) -> None:
    path = tmp_path / "bom.txt"
    path.write_text("\ufeffSECRETKEY KEYID\r\n", encoding="utf-8")
    store = CredentialStore()
    store.load_from_path(path)

    assert store.get("KEYID").secret_key == "SECRETKEY"


def test_load_from_stream_strips_byte_order_mark() -> None:
    binary = CredentialStore()
    binary.load_from_stream(io.BytesIO("\ufeffSECRETKEY KEYID\n".encode("utf-8")))
    text = CredentialStore()
    text.load_from_stream(io.StringIO("\ufeffSECRETKEY KEYID\n"))

    assert binary.get("KEYID").secret_key == "SECRETKEY"
    assert text.get("KEYID").secret_key == "SECRETKEY"


def test_iteration_yields_public_keys() -> None:
    store = CredentialStore([Credential(secret_key="s1", public_key="p1"), Credential(secret_key="s2", public_key="p2")])

    assert list(store) == ["p1", "p2"]
    assert {key: store[key].secret_key for key in store} == {"p1": "s1", "p2": "s2"}
