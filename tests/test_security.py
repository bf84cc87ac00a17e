import logging
from datetime import timedelta

import pytest
from jose import JWTError, jwt

from patternhub.core.config import settings
from patternhub.core.logging_config import TRACE_LEVEL, allowed_levels, level_number
from patternhub.core.security import create_access_token, read_access_subject


def test_access_token_round_trips_subject():
    token = create_access_token(42, "admin")
    assert read_access_subject(token) == 42


def test_expired_token_is_rejected():
    token = create_access_token(42, "admin", expires_delta=timedelta(seconds=-1))
    with pytest.raises(JWTError):
        read_access_subject(token)


def test_token_of_another_type_is_rejected():
    token = jwt.encode(
        {"sub": "42", "type": "refresh"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM
    )
    with pytest.raises(JWTError):
        read_access_subject(token)


def test_token_signed_with_another_key_is_rejected():
    token = jwt.encode({"sub": "42", "type": "access"}, "not-the-key", algorithm=settings.ALGORITHM)
    with pytest.raises(JWTError):
        read_access_subject(token)


def test_level_list_parsing():
    assert allowed_levels("INFO, error") == {logging.INFO, logging.ERROR, logging.CRITICAL}
    assert TRACE_LEVEL in allowed_levels("bogus")
    assert TRACE_LEVEL in allowed_levels(None)
    assert level_number("trace") == TRACE_LEVEL
    assert level_number("nope") == logging.INFO
