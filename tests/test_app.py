from unittest.mock import patch

import pytest

from product_service import init_database
from product_service.utils.telemetry import init_telemetry, traces_endpoint


def test_testing_config(app):
    """Test testing config."""
    assert app.config['TESTING'] is True
    assert app.config['SQLALCHEMY_DATABASE_URI'] == 'sqlite:///:memory:'
    assert app.config['DEFAULT_PAGE_SIZE'] == 10
    assert app.config['MAX_PAGE_SIZE'] == 100


def test_routes_registered(app):
    """Test routes registered."""
    rules = {rule.rule for rule in app.url_map.iter_rules()}

    for route in (
        '/api/products',
        '/api/products/page',
        '/api/products/search',
        '/api/products/filter/price',
        '/api/products/filter/available',
        '/api/products/validate-stock',
        '/api/products/deduct-stock',
        '/api/products/restore-stock',
        '/api/products/<string:product_id>',
        '/health',
        '/health/ready',
        '/health/live',
    ):
        assert route in rules


def test_init_database(app):
    """Test init database."""
    assert init_database(app) is True


def test_telemetry_disabled(app):
    """Test telemetry disabled."""
    assert init_telemetry(app) is None


def test_unknown_route_returns_json(client):
    """Test unknown route returns json."""
    response = client.get('/does-not-exist')

    assert response.status_code == 404
    assert response.get_json()['error'] == 'Not Found'


def test_restx_404_help_disabled(app):
    """Test restx 404 help disabled."""
    assert app.config['RESTX_ERROR_404_HELP'] is False
    assert 'ERROR_404_HELP' not in app.config


@pytest.mark.parametrize('base, expected', [
    ('http://collector:4318', 'http://collector:4318/v1/traces'),
    ('http://collector:4318/', 'http://collector:4318/v1/traces'),
])
def test_traces_endpoint(monkeypatch, base, expected):
    """Test traces endpoint."""
    monkeypatch.setenv('OTEL_EXPORTER_OTLP_ENDPOINT', base)

    assert traces_endpoint() == expected


def test_traces_endpoint_default(monkeypatch):
    """Test traces endpoint default."""
    monkeypatch.delenv('OTEL_EXPORTER_OTLP_ENDPOINT', raising=False)

    assert traces_endpoint() == 'http://localhost:4318/v1/traces'


@patch('product_service.utils.telemetry.trace')
@patch('product_service.utils.telemetry.SQLAlchemyInstrumentor')
@patch('product_service.utils.telemetry.FlaskInstrumentor')
@patch('product_service.utils.telemetry.LoggingInstrumentor')
@patch('product_service.utils.telemetry.BatchSpanProcessor')
@patch('product_service.utils.telemetry.OTLPSpanExporter')
def test_telemetry_exports_to_traces_path(mock_exporter, mock_processor, mock_logging,
                                          mock_flask, mock_sqlalchemy, mock_trace, app, monkeypatch):
    """Test spans are exported to the OTLP traces path."""
    monkeypatch.setenv('OTEL_EXPORTER_OTLP_ENDPOINT', 'http://collector:4318')
    monkeypatch.setitem(app.config, 'ENABLE_TRACING', True)

    provider = init_telemetry(app)

    assert provider is not None
    assert mock_exporter.call_args.kwargs['endpoint'] == 'http://collector:4318/v1/traces'
    mock_trace.set_tracer_provider.assert_called_once_with(provider)
    mock_flask.return_value.instrument_app.assert_called_once_with(app)
