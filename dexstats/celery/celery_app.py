# celery_app.py  ─────────────────────────────────────────────────────────
from celery import Celery
from celery.schedules import crontab
from dexstats.config import settings
import logging
import logging.config

# ── 1.  Broker / backend  ────────────────────────────────────
celery_app = Celery(
    "dexstats",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
)

# ── 2.  Core config, Beat & routing ──────────────────────────
celery_app.conf.update(
    task_serializer       ='json',
    result_serializer     ='json',
    accept_content        =['json'],
    timezone              ='UTC',
    enable_utc            =True,

    # --- use RedBeat for persistent schedules
    beat_scheduler        ="redbeat.RedBeatScheduler",
    redbeat_redis_url     =settings.REDIS_URL,

    # --- recycle workers to avoid long‑lived memory creep
    worker_max_tasks_per_child = 20,
)

# ── 3.  Beat schedule: full relayer sweep ────────────────────
celery_app.conf.beat_schedule = {
    "relayer-sync": {
        "task": "sync_relayers",
        "schedule": crontab(minute=f"*/{settings.SYNC_INTERVAL_MINUTES}"),
        "options": {"queue": "sync"},
    }
}

# ── 4.  Logging ──────────────────────────────────────────────
LOGGING_CONFIG = {
    "version": 1,
    "filters": {
        "shortname": {"()": "dexstats.utils.shortname.ShortNameFilter"},
    },
    "formatters": {
        "custom": {
            "format": "[%(asctime)s] [%(levelname)s] %(shortname)s: %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        }
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "custom", "filters": ["shortname"]},
    },
    "root": {"level": "INFO", "handlers": ["console"]},
}
celery_app.conf.worker_hijack_root_logger = False
logging.config.dictConfig(LOGGING_CONFIG)

# ── 5.  Task modules, imported so Celery registers them ──────
import dexstats.scheduler.sync_tasks  # noqa: E402,F401
