"""Unit tests for the structured logger adapter."""

import logging

from services.shared.structured_logging import get_structured_logger


def test_context_prefixes_message(caplog):
    logger = get_structured_logger("tests.structured", user_id=7)

    with caplog.at_level(logging.INFO, logger="tests.structured"):
        logger.bind(job_id=12, course_id=None).info("Application submitted")

    record = caplog.records[-1]
    assert record.getMessage() == "[user_id=7 | job_id=12] Application submitted"
    assert record.context == "user_id=7 | job_id=12"


def test_bind_does_not_change_parent(caplog):
    parent = get_structured_logger("tests.structured")
    parent.bind(user_id=3)

    with caplog.at_level(logging.INFO, logger="tests.structured"):
        parent.info("plain")

    assert caplog.records[-1].getMessage() == "plain"
    assert caplog.records[-1].context == "none"
