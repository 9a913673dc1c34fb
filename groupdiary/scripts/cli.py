"""
A simple CLI for running the group diary server.
"""

import os
import sys
import time
from multiprocessing import Process

import uvicorn


def run_server(**kwargs):
    for k, v in kwargs.items():
        os.environ[k] = v

    uvicorn.run("groupdiary.api.app:app", host="0.0.0.0")


def setup_tables():
    from groupdiary.config.settings import Settings

    settings = Settings()
    settings.sync_manager().create_all()


def main():
    try:
        run = sys.argv[1] == "run"
        setup = sys.argv[1] == "setup"
        dev = run and sys.argv[2] == "dev"
        prod = run and sys.argv[2] == "prod"
    except IndexError:
        print("Only supported commands are groupdiary run dev, groupdiary run prod, or groupdiary setup")
        exit(1)

    if dev:
        from testcontainers.postgres import PostgresContainer

        with PostgresContainer() as container:
            print(
                f"Container details: username={container.username}, password={container.password}, port={container.get_exposed_port(container.port)}"
            )

            environment = {
                "GROUPDIARY_DATABASE_TYPE": "postgres",
                "GROUPDIARY_DATABASE_USER": container.username,
                "GROUPDIARY_DATABASE_PASSWORD": container.password,
                "GROUPDIARY_DATABASE_PORT": str(container.get_exposed_port(container.port)),
                "GROUPDIARY_DATABASE_HOST": "localhost",
                "GROUPDIARY_DATABASE_DB": container.dbname,
                "GROUPDIARY_DATABASE_ECHO": "False",
                "GROUPDIARY_CREATE_TABLES_ON_STARTUP": "True",
            }

            background_process = Process(target=run_server, kwargs=environment)
            background_process.start()

            while True:
                time.sleep(1)

    if prod:
        setup_tables()
        run_server()

    if setup:
        setup_tables()
        print("Setup complete, tables created")
        exit(0)

    if not (dev or prod or setup):
        print(f"Unknown command: {' '.join(sys.argv[1:])}")
        exit(1)
