"""아젠다 ARQ Worker 실행 스크립트

Usage:
    cd backend
    python -m review_agenda.workers.run_worker

arq CLI로도 실행할 수 있다:
    arq review_agenda.workers.arq_worker.WorkerSettings
"""

import logging

from arq import run_worker

from review_agenda.core.config import get_settings
from review_agenda.workers.arq_worker import WorkerSettings


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger(__name__).info(
        f"Starting agenda worker: env={settings.app_env}, "
        f"deactivation_hour={settings.agenda_deactivation_hour}"
    )
    run_worker(WorkerSettings)


if __name__ == "__main__":
    main()
