import json

import pytest

from dtasdk.cli import main
from dtasdk.credentials import CREDENTIALS_FILE_ENV


def _credentials_file(tmp_path) -> str:
    path = tmp_path / "credentials.txt"
    path.write_text("SECRETKEY KEYID\nAUXKEY AUXKEYID\n", encoding="utf-8")
    return str(path)


def test_cli_keygen_json(capsys) -> None:
    exit_code = main(["keygen", "--json"])

    captured = capsys.readouterr()
    assert exit_code == 0
    assert captured.err == ""
    payload = json.loads(captured.out.strip())
    assert len(payload["secret_key"]) == 64
    assert len(payload["public_key"]) == 36


def test_cli_keygen_line_loads_as_credential(tmp_path, capsys) -> None:
    main(["keygen"])
    line = capsys.readouterr().out
    path = tmp_path / "generated.txt"
    path.write_text(line, encoding="utf-8")

    exit_code = main(["keys", "--credentials", str(path)])

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == line.split()[1]


def test_cli_keys_json(tmp_path, capsys) -> None:
    exit_code = main(["keys", "--credentials", _credentials_file(tmp_path), "--json"])

    payload = json.loads(capsys.readouterr().out.strip())
    assert exit_code == 0
    assert payload["command"] == "keys"
    assert payload["count"] == 2
    assert payload["public_keys"] == ["KEYID", "AUXKEYID"]


def test_cli_sign_then_verify(tmp_path, capsys, monkeypatch) -> None:
    monkeypatch.setenv(CREDENTIALS_FILE_ENV, _credentials_file(tmp_path))
    url = "https://vendor.example.com/instant-access"

    exit_code = main(["sign", url, "--key-id", "KEYID", "-H", "Content-Type: application/json", "--body", "{}", "--json"])
    assert exit_code == 0
    headers = json.loads(capsys.readouterr().out.strip())
    assert headers["Authorization"].startswith("DTA1-HMAC-SHA256 SignedHeaders=content-type;x-amz-date, Credential=KEYID/")

    args = ["verify", url, "--body", "{}"]
    for name, value in headers.items():
        args.extend(["-H", f"{name}: {value}"])
    exit_code = main(args)
    assert exit_code == 0
    assert capsys.readouterr().out.strip() == "valid: KEYID"

    args[3] = "{\"tampered\": true}"
    exit_code = main(args)
    assert exit_code == 1
    assert capsys.readouterr().out.strip() == "invalid: signature_mismatch"


def test_cli_sign_unknown_key(tmp_path, capsys) -> None:
    with pytest.raises(SystemExit) as exit_info:
        main(["sign", "https://vendor.example.com/", "--key-id", "NOPE", "--credentials", _credentials_file(tmp_path)])

    assert exit_info.value.code == 2
    assert "Credential not found" in capsys.readouterr().err
