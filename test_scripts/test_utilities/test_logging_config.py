"""
Tests for the structlog processors and configure_logging().
"""
import json
import logging
from decimal import Decimal

from couplesfin import logging_config
from couplesfin.logging_config import configure_logging


def test_amounts_rendered_as_plain_text():
    event = logging_config._amounts_as_text(None, "info", {"event": "converted", "amount": Decimal("19.00"), "count": 2})
    assert event == {"event": "converted", "amount": "19.00", "count": 2}


def test_amounts_survive_json_renderer():
    chain = logging_config._processor_chain(json_output=True)
    event = {"event": "converted", "amount": Decimal("0.30")}
    for processor in chain[-2:]:
        event = processor(None, "info", event)
    assert json.loads(event)["amount"] == "0.30"


def test_warn_reported_as_warning():
    assert logging_config._level_name(None, "warn", {})["level"] == "WARNING"
    assert logging_config._level_name(None, "debug", {})["level"] == "DEBUG"


def test_unknown_level_falls_back_to_info():
    configure_logging("chatty", json_output=True)
    assert logging.getLogger().level == logging.INFO
    configure_logging("DEBUG", json_output=True)
    assert logging.getLogger().level == logging.DEBUG
