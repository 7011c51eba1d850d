import logging
from typing import Callable

from botocore.exceptions import ClientError

from pipeline_dashboard.services.telegram import send_telegram
from pipeline_dashboard.settings import Settings

log = logging.getLogger("errors")
_settings = Settings()

ErrorReporter = Callable[[BaseException], None]


def get_error_message(err: BaseException) -> str:
    """사용자에게 보여줄 에러 메시지 (AWS 메시지 우선)."""
    if isinstance(err, ClientError):
        msg = err.response.get("Error", {}).get("Message")
        if msg:
            return msg
    text = str(err).strip()
    return text or type(err).__name__


def capture_exception(err: BaseException) -> None:
    log.error("captured exception: %s", get_error_message(err), exc_info=err)
    send_telegram(
        _settings.telegram_bot_token,
        _settings.telegram_chat_id,
        "CRITICAL",
        f"{type(err).__name__}: {get_error_message(err)}",
    )
