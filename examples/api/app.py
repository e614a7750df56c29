"""API — pure JSON REST API.

CRUD for a simple "items" resource. Demonstrates velix for API-only apps:
dict/list returns become JSON, ``{item_id}`` path parameters,
``request.input()`` for POST/PUT bodies, and ``AppConfig.cors`` for
cross-origin consumers.

Run with any ASGI server:
    cd examples/api && uvicorn app:app
"""

import threading
from dataclasses import dataclass

from velix import App, AppConfig, CORSConfig, Request, Response

app = App(
    AppConfig(
        cors=CORSConfig(
            origin="*",
            methods=("GET", "POST", "PUT", "DELETE", "OPTIONS"),
            headers=("Content-Type",),
        ),
    )
)


# ---------------------------------------------------------------------------
# In-memory storage (thread-safe: dispatch runs in worker threads)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Item:
    id: int
    title: str
    done: bool


_items: dict[int, Item] = {}
_next_id = 1
_lock = threading.Lock()


def _get_next_id() -> int:
    global _next_id
    with _lock:
        n = _next_id
        _next_id += 1
        return n


def _to_dict(item: Item) -> dict:
    return {"id": item.id, "title": item.title, "done": item.done}


def _int_arg(value: object, default: int) -> int:
    try:
        return int(str(value))
    except ValueError:
        return default


def _lookup(raw_id: str) -> Item | None:
    if not raw_id.isdigit():
        return None
    with _lock:
        return _items.get(int(raw_id))


def _missing(response: Response) -> None:
    response.status(404).json({"error": "Not found", "status": 404})


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.get("/api/items")
def list_items(request: Request, response: Response):
    """List items with optional limit and offset."""
    limit = min(max(_int_arg(request.query("limit"), 50), 1), 100)
    offset = max(_int_arg(request.query("offset"), 0), 0)

    with _lock:
        all_items = sorted(_items.values(), key=lambda x: x.id)
    page = all_items[offset : offset + limit]

    return {
        "data": [_to_dict(i) for i in page],
        "meta": {"limit": limit, "offset": offset, "total": len(all_items)},
    }


@app.get("/api/items/{item_id}")
def get_item(request: Request, response: Response):
    """Get a single item by ID."""
    item = _lookup(request.param("item_id"))
    if item is None:
        return _missing(response)
    return {"data": _to_dict(item)}


@app.post("/api/items")
def create_item(request: Request, response: Response):
    """Create a new item."""
    title = str(request.input("title", "")).strip()
    if not title:
        return response.status(400).json({"error": "title is required", "status": 400})

    with _lock:
        item_id = _get_next_id()
        item = Item(id=item_id, title=title, done=False)
        _items[item_id] = item

    response.status(201).json({"data": _to_dict(item)})


@app.put("/api/items/{item_id}")
def update_item(request: Request, response: Response):
    """Update an existing item."""
    item = _lookup(request.param("item_id"))
    if item is None:
        return _missing(response)

    raw_title = request.input("title")
    raw_done = request.input("done")
    title = str(raw_title).strip() if raw_title is not None else item.title
    done = bool(raw_done) if raw_done is not None else item.done

    updated = Item(id=item.id, title=title, done=done)
    with _lock:
        _items[item.id] = updated

    return {"data": _to_dict(updated)}


@app.delete("/api/items/{item_id}")
def delete_item(request: Request, response: Response):
    """Delete an item."""
    item = _lookup(request.param("item_id"))
    if item is None:
        return _missing(response)
    with _lock:
        _items.pop(item.id, None)
    return {"data": _to_dict(item)}


@app.options("/api/items")
@app.options("/api/items/{item_id}")
def preflight(request: Request, response: Response):
    """Preflight target; CORS middleware answers before this runs."""
    response.status(204).send()
