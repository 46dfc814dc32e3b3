"""Parameter and result checks shared by the operation services."""

from typing import Any

from pgp_engine.exceptions import EngineDiagnosticError, MissingParameterError
from pgp_engine.models.results import InvocationResult
from pgp_engine.parsing.status import clean_diagnostic


def require(operation: str, **values: Any) -> None:
    """
    Fail on the first empty parameter, in keyword order.

    Raises:
        MissingParameterError: Naming the missing parameter.
    """
    for name, value in values.items():
        if not value:
            raise MissingParameterError(name, operation=operation)


def ensure_result(result: InvocationResult) -> None:
    """
    Fail if the engine wrote any diagnostics.

    Raises:
        EngineDiagnosticError: With the cleaned-up diagnostics as message.
    """
    if result.stderr:
        raise EngineDiagnosticError(clean_diagnostic(result.stderr))


def ensure_output(result: InvocationResult, *, what: str) -> bytes:
    """
    Return the --output content, failing if the engine produced none.

    Raises:
        EngineDiagnosticError: If the output is empty.
    """
    ensure_result(result)
    if not result.output:
        msg = f"Engine produced no {what}"
        raise EngineDiagnosticError(msg, returncode=result.returncode)
    return result.output
