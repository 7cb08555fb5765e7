import logging
from flask import Flask, request, jsonify, current_app
from flask_cors import CORS
from pydantic import ValidationError

from pantrycart.config import Settings, get_settings
from pantrycart.errors import AiNotConfiguredError, AiRateLimitError, AiTransportError, PageFetchError
from pantrycart.models import db
from pantrycart.schemas.dto import (
    GroceryFromUrlsRequest, GroceryListRequest, InventoryAddRequest, ParseTextRequest,
    RecognizeRequest, RecognizeResponse, SaveRecipeRequest, ScaleRequest, ScaleResponse
)
from pantrycart.services import store
from pantrycart.services.ai_client import AiClient
from pantrycart.services.grocery import items_by_category, merge_ingredients
from pantrycart.services.matcher import FridgeMatcher
from pantrycart.services.orchestrator import ExtractionOrchestrator
from pantrycart.services.scaler import scale
from pantrycart.services.text_parser import parse_manual_ingredients, parse_text
from pantrycart.services.vision import IngredientDetector, recognize_from_files

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
NO_AI_KEY_MESSAGE = "No AI key configured (GEMINI_API_KEY / OPENAI_API_KEY); only page scraping was used."

def ok(payload: dict, status=200): return jsonify(payload), status
def err(code="BAD_REQUEST", message="bad request", status=400): return jsonify({"error": {"code": code, "message": message}}), status


def create_app(settings: Settings | None = None, test_config: dict | None = None,
               orchestrator: ExtractionOrchestrator | None = None,
               detector: IngredientDetector | None = None) -> Flask:
    settings = settings or get_settings()

    app = Flask(__name__)
    CORS(app, resources={
        r"/api/parse$": {"origins": "*", "methods": ["GET", "OPTIONS"]},
        r"/api/*": {"origins": "*"},
    })

    app.config["SQLALCHEMY_DATABASE_URI"] = settings.database_url
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["MAX_CONTENT_LENGTH"] = 20 * 1024 * 1024
    if test_config:
        app.config.update(test_config)

    db.init_app(app)

    ai_client = AiClient(settings)
    app.extensions["pantrycart"] = {
        "settings": settings,
        "orchestrator": orchestrator or ExtractionOrchestrator(settings, ai_client=ai_client),
        "detector": detector or IngredientDetector(ai_client),
        "matcher": FridgeMatcher(),
    }

    with app.app_context():
        db.create_all()

    register_routes(app)
    return app


def _ext(name):
    return current_app.extensions["pantrycart"][name]


def _user_id():
    return (request.headers.get("X-User-Id") or "").strip()


def _validation_message(e: ValidationError) -> str:
    first = e.errors()[0]
    loc = ".".join(str(p) for p in first.get("loc", ()))
    return f"{loc}: {first['msg']}" if loc else first["msg"]


# --- Routes ---

def register_routes(app: Flask):

    @app.get("/health")
    def health(): return ok({"status": "ok", "db": "connected"})

    @app.route("/api/parse", methods=ALL_METHODS)
    def parse():
        if request.method == "OPTIONS":
            return "", 200
        if request.method != "GET":
            resp, status = ok({"error": "Method not allowed"}, 405)
            resp.headers["Allow"] = "GET"
            return resp, status

        url = request.args.get("url", "").strip()
        if not url or not url.startswith("http"):
            return ok({"error": "Missing or invalid url"}, 400)

        settings = _ext("settings")
        try:
            result = _ext("orchestrator").resolve_detailed(url)
        except PageFetchError as e:
            app.logger.warning("page fetch failed: %s", e)
            return ok({"error": str(e)}, 500)
        except Exception as e:
            app.logger.exception("parse failed for %s", url)
            return ok({"error": str(e)}, 500)

        payload = result.recipe.to_payload()
        payload.setdefault("groceryByAisle", [])
        if not settings.ai_configured:
            payload["error"] = NO_AI_KEY_MESSAGE
        elif result.rate_limited and not result.recipe.ingredients:
            payload["error"] = AiRateLimitError.user_message
        app.logger.info("parsed %s via %s (%d ingredients)", url, result.strategy, len(result.recipe.ingredients))
        return ok(payload)

    @app.post("/api/parse-text")
    def parse_pasted():
        try:
            body = ParseTextRequest(**(request.get_json(force=True, silent=True) or {}))
        except ValidationError as e:
            return err(message=_validation_message(e))
        recipe = parse_text(body.text)
        if recipe is None:
            return err(message="text has no content")
        return ok(recipe.to_payload())

    @app.post("/api/ingredients/recognize")
    def recognize():
        detector = _ext("detector")
        try:
            files = request.files.getlist("image")
            if files:
                items = recognize_from_files(files, detector)
            else:
                body = RecognizeRequest(**(request.get_json(force=True, silent=True) or {}))
                items = detector.detect_frames(body.images)
        except ValidationError as e:
            return err(message=_validation_message(e))
        except ValueError as e:
            return err(message=str(e))
        except AiRateLimitError:
            return err("RATE_LIMITED", AiRateLimitError.user_message, 429)
        except AiNotConfiguredError as e:
            return err("AI_NOT_CONFIGURED", str(e), 503)
        except AiTransportError as e:
            app.logger.warning("vision call failed: %s", e)
            return err("AI_UNAVAILABLE", str(e), 502)
        return ok(RecognizeResponse(items=items).model_dump(mode="json"))

    @app.post("/api/recipes/scale")
    def scale_recipe():
        try:
            body = ScaleRequest(**(request.get_json(force=True, silent=True) or {}))
        except ValidationError as e:
            return err(message=_validation_message(e))
        return ok(ScaleResponse(ingredients=scale(body.ingredients, body.factor)).model_dump())

    @app.get("/api/recipes")
    def recipes_index():
        uid = _user_id()
        if not uid:
            return err("UNAUTHORIZED", "missing X-User-Id", 401)
        return ok({"recipes": [r.to_dict() for r in store.list_recipes(uid)]})

    @app.post("/api/recipes")
    def recipes_create():
        uid = _user_id()
        if not uid:
            return err("UNAUTHORIZED", "missing X-User-Id", 401)
        try:
            body = SaveRecipeRequest(**(request.get_json(force=True, silent=True) or {}))
        except ValidationError as e:
            return err(message=_validation_message(e))
        return ok(store.save_recipe(uid, body).to_dict(), 201)

    @app.delete("/api/recipes/<int:recipe_id>")
    def recipes_delete(recipe_id):
        uid = _user_id()
        if not uid:
            return err("UNAUTHORIZED", "missing X-User-Id", 401)
        if not store.delete_recipe(uid, recipe_id):
            return err("NOT_FOUND", "recipe not found", 404)
        return ok({"deleted": recipe_id})

    @app.post("/api/recipes/<int:recipe_id>/cooked")
    def recipes_cooked(recipe_id):
        uid = _user_id()
        if not uid:
            return err("UNAUTHORIZED", "missing X-User-Id", 401)
        recipe = store.mark_recipe_cooked(uid, recipe_id)
        if recipe is None:
            return err("NOT_FOUND", "recipe not found", 404)
        return ok(recipe.to_dict())

    @app.get("/api/inventory")
    def inventory_index():
        uid = _user_id()
        if not uid:
            return err("UNAUTHORIZED", "missing X-User-Id", 401)
        return ok({"items": [i.model_dump() for i in store.list_inventory(uid)]})

    @app.post("/api/inventory")
    def inventory_add():
        uid = _user_id()
        if not uid:
            return err("UNAUTHORIZED", "missing X-User-Id", 401)
        try:
            body = InventoryAddRequest(**(request.get_json(force=True, silent=True) or {}))
        except ValidationError as e:
            return err(message=_validation_message(e))
        names = body.names + parse_manual_ingredients(body.text or "")
        if not names:
            return err(message="no item names found")
        added = store.add_inventory_items(uid, names)
        return ok({"added": [i.model_dump() for i in added]}, 201)

    @app.delete("/api/inventory/<int:item_id>")
    def inventory_remove(item_id):
        uid = _user_id()
        if not uid:
            return err("UNAUTHORIZED", "missing X-User-Id", 401)
        if not store.remove_inventory_item(uid, item_id):
            return err("NOT_FOUND", "item not found", 404)
        return ok({"deleted": str(item_id)})

    @app.get("/api/cookbook/matches")
    def cookbook_matches():
        uid = _user_id()
        if not uid:
            return err("UNAUTHORIZED", "missing X-User-Id", 401)
        matcher = _ext("matcher")
        matches = matcher.sort(matcher.match(store.recipe_summaries(uid), store.list_inventory(uid)))
        return ok({"matches": [m.model_dump(mode="json") for m in matches]})

    @app.get("/api/grocery-list")
    def grocery_list_show():
        uid = _user_id()
        if not uid:
            return err("UNAUTHORIZED", "missing X-User-Id", 401)
        current = store.latest_grocery_list(uid)
        if current is None:
            return ok({"list": None, "byCategory": {}})
        return ok(_grocery_payload(current))

    @app.post("/api/grocery-list")
    def grocery_list_update():
        uid = _user_id()
        if not uid:
            return err("UNAUTHORIZED", "missing X-User-Id", 401)
        try:
            body = GroceryListRequest(**(request.get_json(force=True, silent=True) or {}))
        except ValidationError as e:
            return err(message=_validation_message(e))
        ingredients = body.ingredients + parse_manual_ingredients(body.text or "")
        if not ingredients:
            return err(message="no ingredients found")
        current = store.create_or_update_grocery_list(uid, ingredients, body.recipe_id)
        return ok(_grocery_payload(current))

    @app.post("/api/grocery-list/from-urls")
    def grocery_list_from_urls():
        uid = _user_id()
        if not uid:
            return err("UNAUTHORIZED", "missing X-User-Id", 401)
        try:
            body = GroceryFromUrlsRequest(**(request.get_json(force=True, silent=True) or {}))
        except ValidationError as e:
            return err(message=_validation_message(e))

        orchestrator = _ext("orchestrator")
        parsed, failed = [], []
        for url in body.urls:
            try:
                recipe = orchestrator.resolve(url)
            except PageFetchError as e:
                app.logger.warning("page fetch failed: %s", e)
                failed.append({"url": url, "error": str(e)})
                continue
            except Exception as e:
                app.logger.exception("parse failed for %s", url)
                failed.append({"url": url, "error": str(e)})
                continue
            parsed.append((url, recipe))

        if not parsed:
            return err("PARSE_FAILED", "none of the links could be parsed", 502)
        ingredients = merge_ingredients(r for _, r in parsed)
        if not ingredients:
            return err("NO_INGREDIENTS", "no ingredients were found in the parsed recipes", 422)

        current = store.create_or_update_grocery_list(uid, ingredients)
        app.logger.info("grocery list from %d of %d links (%d lines)", len(parsed), len(body.urls), len(ingredients))
        payload = _grocery_payload(current)
        payload["parsed"] = [{"url": url, "title": r.title} for url, r in parsed]
        payload["failed"] = failed
        return ok(payload)

    @app.post("/api/grocery-list/<int:list_id>/items/<item_id>/toggle")
    def grocery_item_toggle(list_id, item_id):
        uid = _user_id()
        if not uid:
            return err("UNAUTHORIZED", "missing X-User-Id", 401)
        current = store.toggle_grocery_item(uid, list_id, item_id)
        if current is None:
            return err("NOT_FOUND", "grocery list not found", 404)
        return ok(_grocery_payload(current))


def _grocery_payload(grocery_list) -> dict:
    grouped = items_by_category(store.list_items(grocery_list))
    return {
        "list": grocery_list.to_dict(),
        "byCategory": {cat: [i.model_dump() for i in items] for cat, items in grouped.items()},
    }


if __name__ == "__main__":
    settings = get_settings()
    create_app(settings).run(host="0.0.0.0", port=settings.port, debug=True)
