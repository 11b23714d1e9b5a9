import threading
import time

import pytest
from pydantic import BaseModel

from pitch_panda import llm


@pytest.fixture
def no_sleep(monkeypatch):
    delays = []
    monkeypatch.setattr(time, "sleep", delays.append)
    return delays


def test_with_retry_backs_off_then_succeeds(no_sleep):
    attempts = []

    def flaky():
        attempts.append(1)
        if len(attempts) < 3:
            raise RuntimeError("rate limited")
        return "ok"

    assert llm.with_retry(flaky, max_retries=3, base_delay=1.0) == "ok"
    assert no_sleep == [1.0, 2.0]


def test_with_retry_reraises_last_error(no_sleep):
    def always_fails():
        raise RuntimeError("down")

    with pytest.raises(RuntimeError, match="down"):
        llm.with_retry(always_fails, max_retries=2, base_delay=0.5)
    assert no_sleep == [0.5]


def test_with_retry_treats_zero_retries_as_one_attempt(no_sleep):
    calls = []

    def fails():
        calls.append(1)
        raise ValueError("bad input")

    with pytest.raises(ValueError):
        llm.with_retry(fails, max_retries=0)
    assert calls == [1]
    assert no_sleep == []


def test_batch_process_preserves_order_and_bounds_concurrency():
    lock = threading.Lock()
    active = []
    peak = []

    def work(n):
        with lock:
            active.append(n)
            peak.append(len(active))
        time.sleep(0.01)
        with lock:
            active.remove(n)
        return n * 10

    assert llm.batch_process(range(8), work, concurrency=3) == [n * 10 for n in range(8)]
    assert max(peak) <= 3


def test_batch_process_propagates_failure():
    def work(n):
        if n == 2:
            raise RuntimeError("slide 2 failed")
        return n

    with pytest.raises(RuntimeError, match="slide 2"):
        llm.batch_process([1, 2, 3], work)


class Answer(BaseModel):
    value: int = 0


class FakeStructuredModel:
    def __init__(self, result):
        self.result = result

    def invoke(self, messages):
        return self.result


def test_invoke_structured_validates_dict_response(monkeypatch):
    monkeypatch.setattr(llm, "get_structured_llm", lambda schema: FakeStructuredModel({"value": 7}))
    assert llm.invoke_structured(Answer, []) == Answer(value=7)


def test_invoke_structured_uses_vision_model(monkeypatch):
    monkeypatch.setattr(llm, "get_structured_vision_llm", lambda schema: FakeStructuredModel(Answer(value=3)))
    assert llm.invoke_structured(Answer, [], vision=True).value == 3


def test_invoke_text_returns_content(monkeypatch):
    class Reply:
        content = "memo text"

    monkeypatch.setattr(llm, "get_text_llm", lambda **kwargs: FakeStructuredModel(Reply()))
    assert llm.invoke_text([]) == "memo text"
