import logging

from flask import Flask, jsonify
from config import Config
from routes import health_bp, templates_bp, timeslots_bp, bookings_bp

from models import db
from flask_migrate import Migrate
from scheduling.errors import SchedulingError


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(app.config.get("LOG_LEVEL", "INFO"))
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(templates_bp)
    app.register_blueprint(timeslots_bp)
    app.register_blueprint(bookings_bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    @app.errorhandler(SchedulingError)
    def _scheduling_error(exc):
        return jsonify(error=exc.message), exc.status_code

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    register_cli(app)

    return app

#-------------------------
import click
from scheduling import timeslots as slot_service
from utils.audit import log_event

def register_cli(app):
    @app.cli.command("generate-slots")
    @click.argument("template_id", type=int)
    @click.argument("start_date")
    @click.argument("end_date")
    def generate_slots(template_id, start_date, end_date):
        """Expand a template into slots for START_DATE..END_DATE (YYYY-MM-DD)."""
        try:
            result = slot_service.generate_slots(template_id, start_date, end_date)
        except SchedulingError as exc:
            raise click.ClickException(exc.message)

        log_event(
            "SLOTS_GENERATE", entity="template", entity_id=template_id,
            metadata={"generated": len(result.generated), "skipped": len(result.skipped)},
        )
        click.echo(f"Generated {len(result.generated)} time slots, skipped {len(result.skipped)} duplicates")

    @app.cli.command("list-available")
    @click.argument("therapist_id")
    def list_available(therapist_id):
        """Print upcoming unbooked slots for a therapist."""
        slots = slot_service.list_available(therapist_id)
        if not slots:
            click.echo("No available slots")
            return
        for s in slots:
            click.echo(f"{s.id}\t{s.date.isoformat()}\t{s.start_time}-{s.end_time}")

#-------------------------




if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5002)
