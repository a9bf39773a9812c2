"""qe-verify flag helpers."""

from __future__ import annotations

from collections.abc import Iterable

from .config import FLAG_CLEAR_STATUS, QE_VERIFY_FLAG
from .models import FlagModel, QeVerifyStatus

_FLAG_TO_STATUS = {
    "+": QeVerifyStatus.PLUS,
    "-": QeVerifyStatus.MINUS,
}

_STATUS_TO_FLAG = {
    QeVerifyStatus.PLUS: "+",
    QeVerifyStatus.MINUS: "-",
}


def get_qe_verify_status(flags: Iterable[FlagModel] | None) -> QeVerifyStatus:
    """Read the qe-verify state from a bug's flags.

    A missing flag, a requested ``?`` flag and any unexpected character all
    read as ``unknown``.
    """
    for flag in flags or ():
        if flag.name == QE_VERIFY_FLAG:
            return _FLAG_TO_STATUS.get(flag.status, QeVerifyStatus.UNKNOWN)
    return QeVerifyStatus.UNKNOWN


def to_flag_status(status: QeVerifyStatus | str) -> str:
    """Translate a target state to the flag character sent to Bugzilla.

    ``unknown`` becomes ``X``, which clears the flag. Values outside
    ``QeVerifyStatus`` raise ``ValueError``, as they do when staged.
    """
    return _STATUS_TO_FLAG.get(QeVerifyStatus(status), FLAG_CLEAR_STATUS)


def qe_verify_flag_update(status: QeVerifyStatus | str) -> list[dict[str, str]]:
    return [{"name": QE_VERIFY_FLAG, "status": to_flag_status(status)}]
