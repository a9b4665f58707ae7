import pytest

from config.celery import app as celery_app


@pytest.fixture(autouse=True, scope="session")
def celery_eager():
    """Run Celery tasks inline so delivery happens inside the test process."""
    celery_app.conf.task_always_eager = True
    celery_app.conf.task_eager_propagates = True
    # The app loads settings with namespace="CELERY", so the namespaced keys
    # take precedence over the lowercase ones above.
    celery_app.conf.CELERY_TASK_ALWAYS_EAGER = True
    celery_app.conf.CELERY_TASK_EAGER_PROPAGATES = True
    yield
