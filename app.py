import logging
import os

from flask import Flask, Blueprint, jsonify, request
from flask_migrate import Migrate
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from config import get_config
from constants import MAX_LENGTHS
from models import db
from services import (
    add_manual_item,
    add_recipe_to_list,
    get_list,
    get_pending_confirmations,
    merge_duplicate_items,
    resolve_auto_added_items,
)
from utils.errors import NotFoundError, ShoppingError

logger = logging.getLogger(__name__)

migrate = Migrate()
api = Blueprint('api', __name__, url_prefix='/api')


def safe_int(value, default=None, min_val=None):
    """Safely parse an int value with an optional lower bound."""
    if isinstance(value, bool):
        return default
    try:
        result = int(value)
    except (ValueError, TypeError):
        return default
    if min_val is not None and result < min_val:
        return default
    return result


def safe_bool(value, default=False):
    """Read a JSON/flag style boolean: true, 'true', '1', 'yes'."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _acting_user():
    """Acting user id from the X-User-Id header (authentication happens upstream)."""
    user_id = request.headers.get('X-User-Id', '').strip()
    return user_id[:MAX_LENGTHS['user_id']] or None


def _household_scope():
    """Household from the X-Household-Id header; when set, other households' rows are 404s."""
    household_id = request.headers.get('X-Household-Id', '').strip()
    return household_id[:MAX_LENGTHS['user_id']] or None


def _error(message, status):
    return jsonify({'ok': False, 'error': message}), status


def _result_response(result, status=200):
    # Only a failed commit is an error; partial batch failures are reported in the body
    if result.get('error'):
        return jsonify(result), 500
    return jsonify(result), status


# ============================================
# ROUTES - RECIPES
# ============================================

@api.route('/recipes/<int:recipe_id>/add-to-list', methods=['POST'])
def recipe_add_to_list(recipe_id):
    """Add a recipe's ingredients to a shopping list (default list if no listId)."""
    data = _json_body()
    list_id = data.get('listId')
    if list_id is not None:
        list_id = safe_int(list_id, min_val=1)
        if list_id is None:
            return _error('listId must be a positive integer', 400)

    result = add_recipe_to_list(
        recipe_id,
        user_id=_acting_user(),
        list_id=list_id,
        auto_confirm=safe_bool(data.get('autoConfirm')),
        household_id=_household_scope(),
    )
    return _result_response(result)


# ============================================
# ROUTES - SHOPPING LISTS
# ============================================

@api.route('/shopping-lists/confirm-auto-added', methods=['POST'])
def shopping_confirm_auto_added():
    data = _json_body()
    item_ids = data.get('itemIds')
    if not isinstance(item_ids, list) or not item_ids:
        return _error('itemIds must be a non-empty list', 400)

    result = resolve_auto_added_items(item_ids, data.get('action'))
    return _result_response(result)


@api.route('/shopping-lists/merge-duplicates', methods=['POST'])
def shopping_merge_duplicates():
    data = _json_body()
    list_id = safe_int(data.get('listId'), min_val=1)
    if list_id is None:
        return _error('listId is required', 400)

    result = merge_duplicate_items(list_id, household_id=_household_scope())
    return _result_response(result)


@api.route('/shopping-lists/<int:list_id>', methods=['GET'])
def shopping_list_view(list_id):
    shopping_list = get_list(list_id, household_id=_household_scope())
    return jsonify(shopping_list.to_dict(include_items=True))


@api.route('/shopping-lists/<int:list_id>/items', methods=['POST'])
def shopping_add(list_id):
    data = _json_body()
    item = add_manual_item(
        list_id,
        data.get('name'),
        quantity=data.get('quantity'),
        user_id=_acting_user(),
        household_id=_household_scope(),
    )
    return jsonify(item.to_dict()), 201


@api.route('/households/<household_id>/pending-confirmations', methods=['GET'])
def household_pending_confirmations(household_id):
    return jsonify(get_pending_confirmations(household_id))


# ============================================
# ERROR HANDLERS
# ============================================

def register_error_handlers(app):
    @app.errorhandler(NotFoundError)
    def handle_not_found(error):
        return _error(str(error), 404)

    @app.errorhandler(ShoppingError)
    def handle_shopping_error(error):
        db.session.rollback()
        return _error(str(error), 400)

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        logger.exception("Database error handling %s %s", request.method, request.path)
        return _error('Database error', 500)

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return _error(error.description, error.code)


# ============================================
# APPLICATION FACTORY
# ============================================

def configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(level=level, format='%(asctime)s - %(levelname)s - %(name)s - %(message)s')
    app.logger.setLevel(level)


def create_app(config_name=None):
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))

    configure_logging(app)
    db.init_app(app)
    migrate.init_app(app, db)

    app.register_blueprint(api)
    register_error_handlers(app)
    return app


def init_db(app):
    """Create any missing tables."""
    with app.app_context():
        db.create_all()


if __name__ == '__main__':
    app = create_app()
    init_db(app)
    # host='0.0.0.0' allows access from other devices on the network
    app.run(debug=app.config.get('DEBUG', False), host='0.0.0.0', port=int(os.environ.get('PORT', 5000)), use_reloader=False)
