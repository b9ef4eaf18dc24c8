from datetime import datetime

from utils import response


def health_check(database):
    """GET /health. Reports the database state without failing when it is down."""
    return response.send(response.success({
        'status': 'healthy',
        'timestamp': datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
        'database': 'connected' if database.ping() else 'disconnected'
    }, 'API is running'))
