import multiprocessing
import os

workers = int(os.getenv("WEB_CONCURRENCY", multiprocessing.cpu_count() * 2 + 1))
timeout = 120
bind = f"{os.getenv('HOST', '0.0.0.0')}:{os.getenv('PORT', '5269')}"
worker_class = "uvicorn.workers.UvicornWorker"
