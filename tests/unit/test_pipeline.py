"""Per-parameter pipeline: prefix, field-name gate, sanitization, type gate."""

import logging
from collections import OrderedDict

import pytest

from formprefill.core.config import Settings
from formprefill.core.errors import InvalidParametersError, ReasonCode
from formprefill.models.outcome import Accepted, FieldType, PassthroughArray, Rejected
from formprefill.pipeline import (
    apply_field_types,
    process_parameter,
    process_parameters,
    value_digest,
)

_SECURITY_LOGGER = "form_prefill.security"


class TestProcessParameter:
    def test_accepted_keyed_by_field_name(self) -> None:
        assert process_parameter("field_EmployeeName", "John Doe") == (
            "EmployeeName",
            Accepted(value="John Doe"),
        )

    def test_non_field_key_ignored(self) -> None:
        assert process_parameter("id", "42") is None

    def test_invalid_name_rejected_before_value(self, monkeypatch) -> None:
        calls = []
        monkeypatch.setattr(
            "formprefill.pipeline.sanitize_value",
            lambda *args, **kwargs: calls.append(args),
        )
        field, outcome = process_parameter("field_<script>", "test")
        assert field == "<script>"
        assert outcome == Rejected(reason=ReasonCode.INVALID_FIELD_NAME)
        assert calls == []

    def test_bare_prefix_rejected(self) -> None:
        _, outcome = process_parameter("field_", "x")
        assert outcome.reason is ReasonCode.INVALID_FIELD_NAME

    def test_long_name_rejected(self) -> None:
        _, outcome = process_parameter("field_" + "A" * 300, "test")
        assert outcome.reason is ReasonCode.INVALID_FIELD_NAME

    def test_malicious_value(self) -> None:
        _, outcome = process_parameter("field_Name", "\" onmouseover=\"alert('x')\"")
        assert outcome.reason is ReasonCode.MALICIOUS_PATTERN

    def test_custom_prefix_and_length(self) -> None:
        settings = Settings(FIELD_PREFIX="q_", MAX_VALUE_LENGTH=4)
        assert process_parameter("field_Name", "x", settings) is None
        assert process_parameter("q_Name", "abcdef", settings) == ("Name", Accepted(value="abcd"))


class TestProcessParameters:
    def test_mixed_input(self) -> None:
        params = OrderedDict(
            [
                ("id", "12"),
                ("field_EmployeeName", "Jane Smith"),
                ("field_TicketID", "5678"),
                ("field_Tags", ["a", "b"]),
                ("field_Meta", {"a": "1"}),
                ("field_Bad", "javascript:alert(1)"),
            ]
        )
        outcomes = process_parameters(params)
        assert list(outcomes) == ["EmployeeName", "TicketID", "Tags", "Meta", "Bad"]
        assert outcomes["EmployeeName"] == Accepted(value="Jane Smith")
        assert outcomes["TicketID"] == Accepted(value="5678")
        assert isinstance(outcomes["Tags"], PassthroughArray)
        assert outcomes["Meta"] == PassthroughArray(items={"a": "1"})
        assert outcomes["Bad"].reason is ReasonCode.MALICIOUS_PATTERN

    def test_empty(self) -> None:
        assert process_parameters({}) == {}

    @pytest.mark.parametrize("params", [["field_a"], "field_a=1", None], ids=["list", "str", "none"])
    def test_non_mapping_raises(self, params) -> None:
        with pytest.raises(InvalidParametersError):
            process_parameters(params)


class TestApplyFieldTypes:
    def test_type_failures_become_invalid_type(self) -> None:
        outcomes = {
            "Email": Accepted(value="invalid-email"),
            "Count": Accepted(value="123"),
            "Notes": Accepted(value="anything"),
        }
        checked = apply_field_types(outcomes, {"Email": FieldType.EMAIL, "Count": "integer"})
        assert checked["Email"] == Rejected(reason=ReasonCode.INVALID_TYPE, detail="email")
        assert checked["Count"] == Accepted(value="123")
        assert checked["Notes"] == Accepted(value="anything")

    def test_non_accepted_outcomes_untouched(self) -> None:
        rejected = Rejected(reason=ReasonCode.MALICIOUS_PATTERN)
        array = PassthroughArray(items=("x",))
        checked = apply_field_types(
            {"A": rejected, "B": array}, {"A": FieldType.INTEGER, "B": FieldType.INTEGER}
        )
        assert checked == {"A": rejected, "B": array}

    def test_does_not_mutate_input(self) -> None:
        outcomes = {"Count": Accepted(value="abc")}
        apply_field_types(outcomes, {"Count": FieldType.INTEGER})
        assert outcomes == {"Count": Accepted(value="abc")}


class TestSecurityLogging:
    def test_rejection_logged_without_raw_value(self, caplog) -> None:
        payload = "javascript:alert('secret')"
        with caplog.at_level(logging.WARNING, logger=_SECURITY_LOGGER):
            process_parameter("field_Name", payload)
        assert "SECURITY event=malicious_pattern" in caplog.text
        assert "field='Name'" in caplog.text
        assert "secret" not in caplog.text
        assert f"sha256:{value_digest(payload)}" in caplog.text

    def test_raw_value_logged_when_enabled(self, caplog) -> None:
        settings = Settings(LOG_REJECTED_VALUES=True)
        with caplog.at_level(logging.WARNING, logger=_SECURITY_LOGGER):
            process_parameter("field_Name", "javascript:alert('secret')", settings)
        assert "secret" in caplog.text

    @pytest.mark.parametrize(
        ("key", "value", "event"),
        [
            ("field_<b>", "x", "invalid_field_name"),
            ("field_Name", 5, "not_scalar"),
        ],
        ids=["name", "scalar"],
    )
    def test_event_names(self, caplog, key, value, event) -> None:
        with caplog.at_level(logging.WARNING, logger=_SECURITY_LOGGER):
            process_parameter(key, value)
        assert f"event={event}" in caplog.text

    def test_invalid_type_logged(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger=_SECURITY_LOGGER):
            apply_field_types({"Count": Accepted(value="abc")}, {"Count": FieldType.INTEGER})
        assert "event=invalid_type" in caplog.text

    def test_accepted_not_logged(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger=_SECURITY_LOGGER):
            process_parameter("field_Name", "John Doe")
        assert caplog.records == []

    def test_truncation_logged_at_info(self, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="formprefill.pipeline"):
            process_parameter("field_Notes", "A" * 15_000)
        assert "Truncated field='Notes' from 15000 to 10000 characters" in caplog.text

    @pytest.mark.parametrize(
        "value",
        ["A" * 10_000, "  " + "A" * 10_000 + "  ", "<b>" + "A" * 10_000 + "</b>"],
        ids=["exact", "padded", "tags-around"],
    )
    def test_value_at_limit_not_reported_as_truncated(self, caplog, value) -> None:
        with caplog.at_level(logging.INFO, logger="formprefill.pipeline"):
            _, outcome = process_parameter("field_Notes", value)
        assert outcome == Accepted(value="A" * 10_000)
        assert "Truncated" not in caplog.text

    def test_truncation_counts_stripped_length(self, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="formprefill.pipeline"):
            process_parameter("field_Notes", "<i>" * 100 + "A" * 10_050)
        assert "from 10050 to 10000" in caplog.text


class TestValueDigest:
    def test_stable_and_short(self) -> None:
        assert value_digest("x") == value_digest("x")
        assert len(value_digest("x")) == 16
        assert value_digest("x") != value_digest("y")

    def test_handles_surrogates(self) -> None:
        assert len(value_digest("\ud800")) == 16
