"""Tests for the Flask API surface."""

import base64
import io

import pytest

from app import create_app
from config import TestingConfig, config
from extensions import limiter

from conftest import png_bytes, solid_image


def upload(client, crop='tomato', image=None, filename='leaf.png'):
    data = {}
    if crop is not None:
        data['crop'] = crop
    if image is not None:
        data['image'] = (io.BytesIO(image), filename)
    return client.post('/api/analyze/', data=data, content_type='multipart/form-data')


def test_health_endpoint(client) -> None:
    response = client.get('/health')

    assert response.status_code == 200
    assert response.get_json()['engine_ready'] is True


def test_analyze_upload(client) -> None:
    response = upload(client, crop='Tomato', image=png_bytes(solid_image((30, 200, 30))))

    assert response.status_code == 200
    body = response.get_json()
    assert body['success'] is True
    data = body['data']
    assert data['crop'] == 'tomato'
    assert data['health'] == 'Excellent'
    assert data['disease'] == 'Healthy'
    assert data['health_color'] == 'green'
    assert len(data['care_tips']) == 3


def test_analyze_undecodable_upload_still_succeeds(client) -> None:
    response = upload(client, crop='wheat', image=b'corrupted bytes')

    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['degraded_stages'] == ['decode']
    assert data['features']['sample_count'] == 50176


@pytest.mark.parametrize(
    'kwargs',
    [
        {'crop': None, 'image': b'x'},
        {'crop': '   ', 'image': b'x'},
        {'crop': 'wheat', 'image': None},
        {'crop': 'wheat', 'image': b'x', 'filename': 'notes.txt'},
        {'crop': 'wheat', 'image': b'x', 'filename': ''},
    ],
)
def test_analyze_rejects_malformed_requests(client, kwargs) -> None:
    response = upload(client, **kwargs)

    assert response.status_code == 400
    assert response.get_json()['success'] is False


def test_analyze_base64(client) -> None:
    encoded = base64.b64encode(png_bytes(solid_image((200, 200, 90)))).decode('ascii')

    response = client.post('/api/analyze/base64', json={
        'crop': 'corn',
        'image_base64': f'data:image/png;base64,{encoded}',
    })

    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['disease'] == 'Common Rust'
    assert data['disease_confidence'] == 95


def test_analyze_base64_rejects_bad_payloads(client) -> None:
    assert client.post('/api/analyze/base64', json={'crop': 'corn'}).status_code == 400
    assert client.post(
        '/api/analyze/base64', json={'crop': 'corn', 'image_base64': '***'}
    ).status_code == 400
    assert client.post(
        '/api/analyze/base64', data='crop=corn', content_type='text/plain'
    ).status_code == 400


def test_treatment_lookup(client) -> None:
    response = client.get('/api/analyze/treatment?disease=Late%20Blight')

    assert response.status_code == 200
    assert 'Apply copper-based fungicide' in response.get_json()['data']['treatment']
    assert client.get('/api/analyze/treatment').status_code == 400


def test_list_crops(client) -> None:
    data = client.get('/api/crops/').get_json()['data']

    assert data['total'] == 5
    assert {crop['name'] for crop in data['crops']} == {'wheat', 'corn', 'tomato', 'potato', 'rice'}
    assert client.get('/api/crops/names').get_json()['data'][0] == 'wheat'


def test_get_crop(client) -> None:
    response = client.get('/api/crops/Potato')

    assert response.status_code == 200
    assert response.get_json()['data']['diseases'][-1] == 'Healthy'
    assert client.get('/api/crops/banana').status_code == 404


def test_care_tips_for_any_crop(client) -> None:
    known = client.get('/api/crops/rice/care-tips').get_json()['data']
    unknown = client.get('/api/crops/banana/care-tips').get_json()['data']

    assert known['is_supported'] is True
    assert len(known['care_tips']) == 3
    assert unknown['is_supported'] is False
    assert unknown['care_tips'][0] == 'Monitor plant health regularly'


def test_unknown_route_returns_json_404(client) -> None:
    response = client.get('/api/nothing-here')

    assert response.status_code == 404
    assert response.get_json()['success'] is False


class TightLimitConfig(TestingConfig):
    RATELIMIT_ENABLED = True
    RATELIMIT_DEFAULT = '2 per minute'


def test_default_rate_limit_comes_from_config(monkeypatch) -> None:
    # The limiter is shared; switch it back off for the session app
    monkeypatch.setattr(limiter, 'enabled', limiter.enabled)
    monkeypatch.setitem(config, 'tight-limit', TightLimitConfig)

    tight_client = create_app('tight-limit').test_client()

    assert tight_client.get('/health').status_code == 200
    assert tight_client.get('/health').status_code == 200
    response = tight_client.get('/health')

    assert response.status_code == 429
    assert response.get_json()['success'] is False
