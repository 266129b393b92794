"""
secretvars — Config, Messages and Logger Tests
==============================================
Run with: python -m pytest tests/ -v
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import base64

import pytest

from secretvars.core.config_loader import load_config
from secretvars.core.exceptions import ConfigError, MalformedError
from secretvars.core.logger import StructuredLogger
from secretvars.contract import ContractConfig
from secretvars.contract.messages import (
    GenerateViewingKey, GetSecretVariables, InstantiateMsg, SetSecretVariables,
    SetViewers, parse_execute, parse_instantiate, parse_query,
)


# ── Config ────────────────────────────────────────────────────────────────────

class TestConfig:
    def test_defaults(self):
        cfg = ContractConfig()
        assert cfg.backend == "memory"
        assert cfg.encryption is True
        assert cfg.key_prefix == "api_key_"

    def test_default_preset_loads(self):
        cfg = ContractConfig("default")
        assert cfg.identity_max_length == 90

    def test_local_preset_loads(self):
        cfg = ContractConfig("local")
        assert cfg.encryption is False
        assert cfg.log_console is True

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "contract.yaml"
        path.write_text("credentials:\n  key_prefix: vk_\n", encoding="utf-8")
        assert ContractConfig(str(path)).key_prefix == "vk_"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(str(tmp_path / "absent.yaml"))

    def test_bad_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("storage: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(str(path))

    @pytest.mark.parametrize("raw", [
        {"storage": {"backend": "redis"}},
        {"storage": {"backend": "file"}},
        {"storage": {"encryption": "yes"}},
        {"credentials": {"key_prefix": ""}},
        {"credentials": {"max_entropy_length": -1}},
        {"identity": {"min_length": 10, "max_length": 5}},
        {"logging": {"max_entries": 1}},
        {"scanner": {}},
    ])
    def test_invalid_values_raise(self, raw):
        with pytest.raises(ConfigError):
            ContractConfig(raw)


# ── Messages ──────────────────────────────────────────────────────────────────

class TestMessages:
    def test_instantiate_bytes_and_base64(self):
        assert parse_instantiate({"prng_seed": b"seed"}) == InstantiateMsg(b"seed")
        encoded = base64.b64encode(b"seed").decode()
        assert parse_instantiate({"prng_seed": encoded}) == InstantiateMsg(b"seed")

    def test_instantiate_bad_base64(self):
        with pytest.raises(MalformedError):
            parse_instantiate({"prng_seed": "not base64!"})

    def test_execute_variants(self):
        assert parse_execute({"set_viewers": {"viewers": ["a1a"]}}) == SetViewers(("a1a",))
        assert parse_execute({"set_secret_variables": {"secret_variables": "x"}}) == \
            SetSecretVariables("x")
        assert parse_execute({"generate_viewing_key": {"entropy": "e"}}) == \
            GenerateViewingKey("e")

    def test_typed_messages_pass_through(self):
        msg = GenerateViewingKey("e")
        assert parse_execute(msg) is msg

    @pytest.mark.parametrize("raw", [
        {},
        {"set_viewers": {"viewers": ["a1a"]}, "generate_viewing_key": {"entropy": "e"}},
        {"burn": {}},
        {"set_viewers": ["a1a"]},
        {"set_viewers": {}},
        {"set_viewers": {"viewers": "a1a"}},
        {"set_viewers": {"viewers": [1]}},
        {"generate_viewing_key": {"entropy": 5}},
    ])
    def test_malformed_execute(self, raw):
        with pytest.raises(MalformedError):
            parse_execute(raw)

    def test_query(self):
        msg = parse_query({"get_secret_variables": {"viewing_key": "k", "account": "a1a"}})
        assert msg == GetSecretVariables(viewing_key="k", account="a1a")
        assert "viewing_key=<redacted>" in repr(msg)

    def test_malformed_query(self):
        with pytest.raises(MalformedError):
            parse_query({"get_secret_variables": {"viewing_key": "k"}})


# ── Logger ────────────────────────────────────────────────────────────────────

class TestLogger:
    def test_confidential_fields_redacted(self):
        logger = StructuredLogger()
        entry = logger.debug("generate_viewing_key", viewing_key="api_key_abc", account="viewer1")
        assert entry["viewing_key"] == "<redacted>"
        assert entry["account"] == "viewer1"

    def test_filter_and_cap(self):
        logger = StructuredLogger(max_entries=4)
        for i in range(6):
            logger.log("op", index=i)
        assert len(logger.get_entries("op")) <= 4
        assert logger.get_entries(level="DEBUG") == []
