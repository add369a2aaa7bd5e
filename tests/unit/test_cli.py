"""
Unit tests for CLI module.

Tests command-line interface functionality using Click's testing utilities.
"""

import json
import pytest
from click.testing import CliRunner

from portopt.cli import main, __version__


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def no_delay(monkeypatch):
    """Disable the artificial optimization delay for every CLI test."""
    monkeypatch.setenv("PORTOPT_CALCULATION_DELAY", "0")
    monkeypatch.delenv("PORTOPT_SEED", raising=False)


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_request(tmp_path):
    """Create temporary request file."""
    request = {
        "schema_version": "0.1.0",
        "monthly_contribution": 1000,
        "horizon_years": 10,
        "target_kind": "value",
        "target_multiple": None,
        "target_value": 200000,
        "current_mix": {"stocks": 60, "bonds": 30, "cash": 10, "crypto": 0},
        "risk_tolerance": "high",
    }
    request_file = tmp_path / "request.json"
    with open(request_file, "w") as f:
        json.dump(request, f)
    return request_file


# ============================================================================
# BASIC CLI TESTS
# ============================================================================

class TestCLIBasic:
    """Test basic CLI functionality."""

    def test_version(self, runner):
        """Test --version flag."""
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help(self, runner):
        """Test --help flag."""
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "PortOpt" in result.output
        assert "optimize" in result.output

    def test_optimize_help(self, runner):
        result = runner.invoke(main, ["optimize", "--help"])
        assert result.exit_code == 0
        assert "--contribution" in result.output
        assert "--risk" in result.output

    def test_info(self, runner):
        """Test info command."""
        result = runner.invoke(main, ["info"])
        assert result.exit_code == 0
        assert "PortOpt Version" in result.output
        assert "numpy" in result.output


# ============================================================================
# OPTIMIZE COMMAND TESTS
# ============================================================================

class TestOptimizeCommand:
    """Test optimize command."""

    def test_defaults(self, runner):
        """Default request renders all three tables."""
        result = runner.invoke(main, ["optimize", "--seed", "42"])

        assert result.exit_code == 0, result.output
        assert "Optimized Allocation" in result.output
        assert "Risk Metrics" in result.output
        assert "Projection" in result.output
        assert "target:" in result.output

    def test_quiet_summary(self, runner):
        """Quiet mode prints the three headline figures."""
        result = runner.invoke(main, ["--quiet", "optimize", "--seed", "42"])

        assert result.exit_code == 0, result.output
        assert "Expected Return: 7.25%" in result.output
        assert "Final Value: $" in result.output
        assert "Recovery Time: 5 years" in result.output

    def test_risk_option(self, runner):
        result = runner.invoke(main, ["-q", "optimize", "--risk", "low", "--seed", "1"])

        assert result.exit_code == 0, result.output
        # low bucket: 0.3·8 + 0.2·10 + 0.3·2.4 + 0.15·4.2 + 0.05·1 = 5.8%
        assert "Expected Return: 5.80%" in result.output

    def test_seed_reproducible(self, runner):
        args = ["-q", "optimize", "--seed", "123"]
        first = runner.invoke(main, args)
        second = runner.invoke(main, args)

        assert first.exit_code == 0
        assert first.output == second.output

    def test_seed_from_environment(self, runner, monkeypatch):
        monkeypatch.setenv("PORTOPT_SEED", "5")
        first = runner.invoke(main, ["-q", "optimize"])
        second = runner.invoke(main, ["-q", "optimize", "--seed", "5"])

        assert first.exit_code == 0
        assert first.output == second.output

    def test_explicit_delay(self, runner):
        result = runner.invoke(main, ["-q", "optimize", "--delay", "0", "--seed", "1"])
        assert result.exit_code == 0

    def test_mix_not_100(self, runner):
        """A mix that does not sum to 100 is rejected."""
        result = runner.invoke(main, ["optimize", "--stocks", "60", "--bonds", "30",
                                      "--cash", "5", "--crypto", "0"])

        assert result.exit_code == 1
        assert "Invalid request" in result.output
        assert "Allocation must sum to 100%" in result.output

    @pytest.mark.parametrize("option", [["-c", "inf"], ["--target-value", "inf"], ["-c", "nan"]])
    def test_non_finite_amount(self, runner, option):
        """Infinite or NaN amounts are rejected before optimization."""
        result = runner.invoke(main, ["optimize", *option])

        assert result.exit_code == 1
        assert "Invalid request" in result.output

    def test_contribution_below_one(self, runner):
        result = runner.invoke(main, ["optimize", "--contribution", "0.5"])

        assert result.exit_code == 1
        assert "monthly_contribution" in result.output

    @pytest.mark.parametrize("horizon", ["0", "51"])
    def test_horizon_out_of_range(self, runner, horizon):
        result = runner.invoke(main, ["optimize", "--horizon", horizon])

        assert result.exit_code == 1
        assert "horizon_years" in result.output

    def test_both_targets_rejected(self, runner):
        result = runner.invoke(main, ["optimize", "--target-multiple", "5",
                                      "--target-value", "100000"])

        assert result.exit_code == 1
        assert "not both" in result.output

    def test_invalid_risk(self, runner):
        """Click rejects unknown risk levels before the engine sees them."""
        result = runner.invoke(main, ["optimize", "--risk", "extreme"])
        assert result.exit_code != 0

    def test_target_value(self, runner):
        result = runner.invoke(main, ["optimize", "--target-value", "250000", "--seed", "3"])

        assert result.exit_code == 0, result.output
        assert "$250,000" in result.output

    def test_from_request_file(self, runner, temp_request):
        result = runner.invoke(main, ["-q", "optimize", "--input", str(temp_request),
                                      "--seed", "42"])

        assert result.exit_code == 0, result.output
        # high bucket expected return
        assert "Expected Return: 8.63%" in result.output

    def test_malformed_request_file(self, runner, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json")

        result = runner.invoke(main, ["optimize", "--input", str(bad)])

        assert result.exit_code == 1
        assert "not valid JSON" in result.output

    def test_missing_request_file(self, runner, tmp_path):
        result = runner.invoke(main, ["optimize", "--input", str(tmp_path / "missing.json")])
        assert result.exit_code != 0

    def test_output_file(self, runner, tmp_path):
        """--output writes the result as JSON."""
        output = tmp_path / "out" / "result.json"
        result = runner.invoke(main, ["optimize", "--horizon", "5", "--seed", "42",
                                      "--output", str(output)])

        assert result.exit_code == 0, result.output
        assert output.exists()

        with open(output) as f:
            data = json.load(f)
        assert data["target_value"] == 120000
        assert len(data["optimized_projection"]) == 6
        assert data["optimized_weights"]["SWDA"] == 40

    def test_plot_file(self, runner, tmp_path):
        """--plot saves a chart image."""
        chart = tmp_path / "chart.png"
        result = runner.invoke(main, ["-q", "optimize", "--horizon", "5", "--seed", "42",
                                      "--plot", str(chart)])

        assert result.exit_code == 0, result.output
        assert chart.exists()
        assert chart.stat().st_size > 0

    def test_plot_closes_figure(self, runner, tmp_path):
        """The CLI closes the chart once it is saved."""
        import matplotlib.pyplot as plt

        before = set(plt.get_fignums())
        result = runner.invoke(main, ["-q", "optimize", "--horizon", "3", "--seed", "1",
                                      "--plot", str(tmp_path / "c.png")])

        assert result.exit_code == 0, result.output
        assert set(plt.get_fignums()) == before


# ============================================================================
# OTHER COMMANDS
# ============================================================================

class TestSettingsErrors:
    """Test handling of invalid environment settings."""

    def test_bad_log_level(self, runner, monkeypatch):
        monkeypatch.setenv("PORTOPT_LOG_LEVEL", "verbose")
        result = runner.invoke(main, ["instruments"])

        assert result.exit_code == 1
        assert "Invalid settings" in result.output
        assert "log_level" in result.output

    def test_bad_delay(self, runner, monkeypatch):
        monkeypatch.setenv("PORTOPT_CALCULATION_DELAY", "-3")
        result = runner.invoke(main, ["optimize"])

        assert result.exit_code == 1
        assert "calculation_delay" in result.output


class TestInstrumentsCommand:
    """Test instruments command."""

    def test_table(self, runner):
        result = runner.invoke(main, ["instruments"])

        assert result.exit_code == 0
        assert "SWDA" in result.output
        assert "CRYPTO" in result.output

    def test_quiet(self, runner):
        result = runner.invoke(main, ["-q", "instruments"])

        assert result.exit_code == 0
        assert "Mean Return" in result.output
        assert "TLT" in result.output


class TestTemplateCommand:
    """Test template command."""

    def test_multiplier_template(self, runner, tmp_path):
        output = tmp_path / "request.json"
        result = runner.invoke(main, ["template", str(output)])

        assert result.exit_code == 0
        assert "Created request file" in result.output
        with open(output) as f:
            data = json.load(f)
        assert data["target_kind"] == "multiplier"
        assert data["target_multiple"] == 10

    def test_value_template(self, runner, tmp_path):
        output = tmp_path / "request.json"
        result = runner.invoke(main, ["template", str(output), "--target", "value"])

        assert result.exit_code == 0
        with open(output) as f:
            data = json.load(f)
        assert data["target_kind"] == "value"
        assert data["target_value"] == 1_000_000

    def test_template_round_trip(self, runner, tmp_path):
        """A generated template is accepted by optimize."""
        output = tmp_path / "request.json"
        runner.invoke(main, ["template", str(output)])

        result = runner.invoke(main, ["-q", "optimize", "--input", str(output), "--seed", "1"])
        assert result.exit_code == 0, result.output
