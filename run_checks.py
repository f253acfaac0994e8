from fastapi.testclient import TestClient
from safetrade.main import app

with TestClient(app) as client:
    print('ROOT:')
    print(client.get('/').json())

    print('\nHEALTH:')
    print(client.get('/health').json())

    print('\nDB HEALTH:')
    resp = client.get('/health/db')
    print(resp.status_code)
    try:
        print(resp.json())
    except ValueError:
        print(resp.text)

    print('\nCATALOGS:')
    print(client.get('/api/v1/reportes/catalogos').json())

    print('\nCOMMUNITY TRENDS (30 days):')
    print(client.get('/api/v1/tendencias-comunidad/tendencias', params={'period': '30days'}).json())
