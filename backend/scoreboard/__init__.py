from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    from scoreboard.main import main
    flask_app.register_blueprint(main)

    from scoreboard.api.matches import matches
    # Mount match routes under /api to match frontend API client
    flask_app.register_blueprint(matches, url_prefix='/api/matches')

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from scoreboard.models import Match
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            # Seed one match ready to be started from the scoring panel
            match = Match(
                weight_category='-68kg',
                red_competitor_name='Red Competitor',
                red_competitor_country='KOR',
                blue_competitor_name='Blue Competitor',
                blue_competitor_country='GBR',
                total_rounds=flask_app.config['DEFAULT_TOTAL_ROUNDS'],
                round_duration_minutes=flask_app.config['DEFAULT_ROUND_DURATION_MINUTES'],
            )
            db.session.add(match)
            db.session.commit()
            print('Database has been reset and seeded!')

    @click.command('check-totals')
    def check_totals_command():
        """Recomputes every match total from its event log and reports drift."""
        from scoreboard.services.matches.ledger import find_total_mismatches
        with flask_app.app_context():
            mismatches = find_total_mismatches()
            for m in mismatches:
                print(
                    f"match={m['match_id']} stored=({m['stored']['red']}, {m['stored']['blue']}) "
                    f"events=({m['events']['red']}, {m['events']['blue']}) "
                    f"rounds=({m['rounds']['red']}, {m['rounds']['blue']})"
                )
            if mismatches:
                raise click.ClickException(f'{len(mismatches)} match(es) out of balance')
            print('All match totals balance.')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(check_totals_command)

    return flask_app
