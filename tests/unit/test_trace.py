import logging

from homework_gateway.core.trace import RequestContext, log_event


def test_request_ids_are_unique():
    ids = {RequestContext.new().request_id for _ in range(100)}
    assert len(ids) == 100


def test_log_event_carries_request_id(caplog):
    ctx = RequestContext.new()
    with caplog.at_level(logging.INFO, logger="homework_gateway.gateway"):
        log_event(ctx, logging.INFO, "agent.selected", agent="'Math Agent'")

    [rec] = caplog.records
    assert rec.levelno == logging.INFO
    assert rec.getMessage() == f"[gateway] agent.selected request_id={ctx.request_id} agent='Math Agent'"


def test_elapsed_ms_is_non_negative():
    assert RequestContext.new().elapsed_ms() >= 0
