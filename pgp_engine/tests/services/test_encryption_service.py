import pytest

from pgp_engine.exceptions import EngineDiagnosticError, MissingParameterError
from pgp_engine.models.params import EncryptParams
from pgp_engine.models.results import InvocationResult, IOMode
from pgp_engine.process.handle import EngineHandle
from pgp_engine.process.keyring import KeyringManager
from pgp_engine.services.encryption_service import EncryptionService
from pgp_engine.tests.utils.fake_invoker import FakeInvoker

CIPHERTEXT = b"-----BEGIN PGP MESSAGE-----\n...\n-----END PGP MESSAGE-----\n"


def _service(handle: EngineHandle, invoker: FakeInvoker) -> EncryptionService:
    return EncryptionService(handle, invoker, KeyringManager(handle, invoker))


def test_encrypt_to_recipients(handle: EngineHandle) -> None:
    invoker = FakeInvoker(by_flag={"--encrypt": InvocationResult(output=CIPHERTEXT)})
    params = EncryptParams(
        recipients={"jane@example.com": "JANE KEY", "0x0123456789ABCDEF": "JOHN KEY"}
    )

    ciphertext = _service(handle, invoker).encrypt(b"hello", params)

    assert ciphertext == CIPHERTEXT
    imported, encrypted = invoker.calls
    assert imported.input_lines == ["JANE KEY", "JOHN KEY"]
    assert encrypted.args[:3] == ["--armor", "--batch", "--always-trust"]
    assert encrypted.args[3] == "--keyring"
    assert encrypted.args[5:10] == [
        "--encrypt",
        "--recipient",
        "jane@example.com",
        "--recipient",
        "0x0123456789ABCDEF",
    ]
    assert encrypted.files[encrypted.args[-1]] == b"hello"
    assert encrypted.mode is IOMode.WRITE
    assert encrypted.input_lines is None
    assert encrypted.capture_output and encrypted.capture_stderr


def test_encrypt_symmetric(handle: EngineHandle) -> None:
    invoker = FakeInvoker(by_flag={"--symmetric": InvocationResult(output=CIPHERTEXT)})

    ciphertext = _service(handle, invoker).encrypt(
        "hello", EncryptParams(symmetric=True, passphrase="p@ss")
    )

    assert ciphertext == CIPHERTEXT
    [call] = invoker.calls
    assert call.args[:-1] == [
        "--armor",
        "--batch",
        "--always-trust",
        "--symmetric",
        "--force-mdc",
        "--passphrase-fd",
        "0",
    ]
    assert call.input_lines == ["p@ss"]
    assert "--keyring" not in call.args


def test_encrypt_removes_input_file(handle: EngineHandle) -> None:
    invoker = FakeInvoker(by_flag={"--symmetric": InvocationResult(output=CIPHERTEXT)})

    _service(handle, invoker).encrypt(b"hello", EncryptParams(symmetric=True, passphrase="p"))

    assert list(handle.home.iterdir()) == []


def test_encrypt_requires_recipients(handle: EngineHandle) -> None:
    invoker = FakeInvoker()

    with pytest.raises(MissingParameterError) as exc_info:
        _service(handle, invoker).encrypt(b"hello", EncryptParams())

    assert exc_info.value.parameter == "recipients"
    assert invoker.calls == []


def test_encrypt_symmetric_requires_passphrase(handle: EngineHandle) -> None:
    with pytest.raises(MissingParameterError) as exc_info:
        _service(handle, FakeInvoker()).encrypt(b"hello", EncryptParams(symmetric=True))

    assert exc_info.value.parameter == "passphrase"


def test_encrypt_engine_diagnostics_raise(handle: EngineHandle) -> None:
    invoker = FakeInvoker(
        by_flag={
            "--encrypt": InvocationResult(
                output=b"", stderr="gpg: jane@example.com: skipped: No public key\n"
            )
        }
    )

    with pytest.raises(EngineDiagnosticError, match="skipped: No public key"):
        _service(handle, invoker).encrypt(
            b"hello", EncryptParams(recipients={"jane@example.com": "KEY"})
        )


def test_encrypt_empty_output_raises(handle: EngineHandle) -> None:
    with pytest.raises(EngineDiagnosticError, match="no ciphertext"):
        _service(handle, FakeInvoker()).encrypt(
            b"hello", EncryptParams(symmetric=True, passphrase="p")
        )


def test_is_encrypted_symmetrically_detects_marker(handle: EngineHandle) -> None:
    stderr = (
        "gpg: AES256.CFB encrypted data\n"
        "gpg: encrypted with 1 passphrase\n"
        "gpg: decryption failed: Bad session key\n"
    )
    invoker = FakeInvoker([InvocationResult(stderr=stderr, returncode=2)])

    assert _service(handle, invoker).is_encrypted_symmetrically(CIPHERTEXT)

    [call] = invoker.calls
    assert call.args == ["--decrypt", "--batch", "--passphrase", ""]
    assert call.mode is IOMode.WRITE
    assert call.input_lines == CIPHERTEXT
    assert call.verbose is True
    assert call.parseable


def test_is_encrypted_symmetrically_false_for_public_key_message(handle: EngineHandle) -> None:
    stderr = "gpg: encrypted with 2048-bit RSA key, ID FEDCBA9876543210\n"
    invoker = FakeInvoker([InvocationResult(stderr=stderr, returncode=2)])

    assert not _service(handle, invoker).is_encrypted_symmetrically(CIPHERTEXT)
