"""
Tests for configuration and runtime reconfiguration.

Covers:
- XlogConfig validation (YAML, dict, bad severities)
- SiteReconfig level management
- Applying a config to a registry
- Status snapshot
"""

import io

import pytest
from pydantic import ValidationError

from xlog.config import StderrSinkConfig, XlogConfig
from xlog.core import Registry
from xlog.reconfig import SiteReconfig, set_severity_on_all_loggers
from xlog.severity import Severity
from xlog.writer import WriterSink


@pytest.fixture(autouse=True)
def reset_registry():
    Registry.reset()
    yield
    Registry.reset()


@pytest.fixture
def registry():
    reg = Registry(stream=io.StringIO())
    reg.new("db", Severity.TRACE)
    reg.new("http", Severity.INFO)
    reg.new("cache", Severity.EMERGENCY)
    return reg


# ═══════════════════════════════════════════════════════════════════
#  XlogConfig
# ═══════════════════════════════════════════════════════════════════

class TestXlogConfig:
    YAML = """
default_severity: INFO
severities:
  db: debug
  http: 5
root_severity: TRACE
stderr:
  enabled: true
  severity: WARN
  color: false
"""

    def test_from_yaml_string(self):
        config = XlogConfig.from_yaml_string(self.YAML)
        assert config.default_severity == "INFO"
        assert config.resolved_severities == {"db": Severity.DEBUG, "http": Severity.WARN}
        assert config.stderr.resolved_severity == Severity.WARN
        assert config.stderr.color is False

    def test_from_yaml_file(self, tmp_path):
        path = tmp_path / "logging.yaml"
        path.write_text(self.YAML, encoding="utf-8")
        config = XlogConfig.from_yaml(path)
        assert config.root_severity == "TRACE"

    def test_empty_document(self):
        config = XlogConfig.from_yaml_string("")
        assert config.default_severity is None
        assert config.severities == {}
        assert config.stderr is None

    def test_from_dict(self):
        config = XlogConfig.from_dict({"default_severity": 4})
        assert config.default_severity == 4

    def test_bad_label_rejected(self):
        with pytest.raises(ValidationError):
            XlogConfig.from_dict({"default_severity": "LOUD"})

    def test_bad_value_rejected(self):
        with pytest.raises(ValidationError):
            XlogConfig.from_dict({"severities": {"db": 99}})

    def test_stderr_defaults(self):
        cfg = StderrSinkConfig()
        assert cfg.enabled is True
        assert cfg.resolved_severity == Severity.TRACE
        assert cfg.color is None

    def test_to_dict_excludes_none(self):
        config = XlogConfig.from_dict({"default_severity": "INFO"})
        assert config.to_dict() == {"default_severity": "INFO", "severities": {}}


# ═══════════════════════════════════════════════════════════════════
#  SiteReconfig
# ═══════════════════════════════════════════════════════════════════

class TestSiteReconfig:
    def test_set_all(self, registry):
        SiteReconfig(registry).set_all("error")
        assert {n: registry.get(n).severity for n in registry.names()} == {
            "db": Severity.ERROR, "http": Severity.ERROR, "cache": Severity.ERROR,
        }

    def test_set_all_leaves_root(self, registry):
        set_severity_on_all_loggers(Severity.ERROR, registry)
        assert registry.root.severity == Severity.TRACE

    def test_default_registry(self):
        reg = Registry.instance()
        reg.new("solo")
        SiteReconfig().set_all(Severity.NOTICE)
        assert reg.get("solo").severity == Severity.NOTICE

    def test_empty_explicit_registry_is_not_replaced(self):
        """An explicit registry with no loggers yet stays the target."""
        global_log, global_site = Registry.instance().new("g")
        mine = Registry(stream=io.StringIO())
        assert len(mine) == 0

        set_severity_on_all_loggers(Severity.NONE, mine)
        assert global_site.severity == Severity.TRACE

        reconfig = SiteReconfig(mine)
        mine.new("a")
        reconfig.set_all(Severity.ERROR)
        assert mine.get("a").severity == Severity.ERROR
        assert global_site.severity == Severity.TRACE

    def test_empty_explicit_registry_status(self):
        Registry.instance().new("g")
        status = SiteReconfig(Registry(stream=io.StringIO())).status()
        assert status["loggers"] == {}

    def test_set_severity_by_name(self, registry):
        SiteReconfig(registry).set_severity("http", "trace")
        assert registry.get("http").severity == Severity.TRACE

    def test_set_severity_unknown(self, registry):
        with pytest.raises(ValueError, match="Unknown logger"):
            SiteReconfig(registry).set_severity("ghost", "INFO")

    def test_set_stderr_severity(self, registry):
        SiteReconfig(registry).set_stderr_severity(Severity.ERROR)
        assert registry.stderr_sink.severity == Severity.ERROR

    def test_status(self, registry):
        status = SiteReconfig(registry).status()
        assert status["root_severity"] == "TRACE"
        assert status["loggers"] == {"cache": "EMERGENCY", "db": "TRACE", "http": "INFO"}
        assert status["root_sinks"] == [{"type": "WriterSink", "severity": "TRACE"}]


class TestApplyConfig:
    def test_default_then_overrides(self, registry):
        config = XlogConfig.from_dict({
            "default_severity": "WARN",
            "severities": {"db": "DEBUG"},
            "root_severity": "INFO",
        })
        SiteReconfig(registry).apply(config)
        assert registry.get("db").severity == Severity.DEBUG
        assert registry.get("http").severity == Severity.WARN
        assert registry.get("cache").severity == Severity.WARN
        assert registry.root.severity == Severity.INFO

    def test_unknown_name_raises_after_applying_known(self, registry):
        config = XlogConfig.from_dict({"severities": {"db": "ERROR", "ghost": "INFO"}})
        with pytest.raises(ValueError, match="ghost"):
            SiteReconfig(registry).apply(config)
        assert registry.get("db").severity == Severity.ERROR

    def test_stderr_severity(self, registry):
        SiteReconfig(registry).apply(XlogConfig.from_dict({"stderr": {"severity": "ERROR"}}))
        assert registry.stderr_sink.severity == Severity.ERROR
        assert registry.stderr_sink in registry.root_sink

    def test_stderr_disabled(self, registry):
        SiteReconfig(registry).apply(XlogConfig.from_dict({"stderr": {"enabled": False}}))
        assert len(registry.root_sink) == 0
        log = registry.get("db")
        assert log is not None

    def test_stderr_color_rebuilds_sink(self, registry):
        old = registry.stderr_sink
        SiteReconfig(registry).apply(
            XlogConfig.from_dict({"stderr": {"color": True, "severity": "NOTICE"}})
        )
        new = registry.stderr_sink
        assert new is not old
        assert isinstance(new, WriterSink)
        assert new.stream is old.stream
        assert new.severity == Severity.NOTICE
        assert registry.root_sink.sinks == (new,)

    def test_applied_config_filters_output(self):
        stream = io.StringIO()
        reg = Registry(stream=stream)
        log, _ = reg.new("svc")
        SiteReconfig(reg).apply(XlogConfig.from_yaml_string("default_severity: WARN\n"))
        log.infof("hidden")
        log.warnf("shown")
        out = stream.getvalue()
        assert "hidden" not in out
        assert "[WARN] svc: shown" in out
