import os
from jarla import create_app
from jarla.jobs.stats_refresher import start_scheduler

app = create_app()

if __name__ == "__main__":
    start_scheduler(app)

    host = os.getenv("FLASK_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_PORT", "5000"))
    debug = os.getenv("JARLA_ENV", "dev") == "dev"

    # the reloader would start a second scheduler
    app.run(host=host, port=port, debug=debug, use_reloader=False)
