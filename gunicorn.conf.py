import multiprocessing
import os

workers = int(os.getenv("WEB_CONCURRENCY", multiprocessing.cpu_count() * 2 + 1))
# Each request may wait on the live API and then Overpass in turn
timeout = 60
bind = os.getenv("BIND", "0.0.0.0:5269")
worker_class = "uvicorn.workers.UvicornWorker"
