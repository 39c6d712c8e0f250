# app.py

import json
import logging
import os

from flask import Flask, request, jsonify

from oids import FormatError
from registry import CUSTOM_ARC, DuplicateOIDError, create_custom_oid
from sample_data import sample_nodes
from schema import parse_flat_records
from search import SEARCH_FIELDS, SearchOptions
from storage import StorageError, load_document, save_document
from store import TreeStore
from tree import path_to

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config['TREE_FILE'] = os.environ.get('OID_TREE_FILE', 'oid-tree.json')
app.config['CUSTOM_ARC'] = os.environ.get('OID_CUSTOM_ARC', CUSTOM_ARC)
app.config['AUTOSAVE'] = os.environ.get('OID_AUTOSAVE', '1').lower() not in ('0', 'false', 'no')

# --- Canonical tree ---
STORE = TreeStore()

# Fields a client may patch through the API; ids and children stay server-side.
PATCHABLE = ('oid', 'name', 'description', 'parent')


def load_tree_from_disk():
    """Loads the saved tree, falling back to the built-in sample forest."""
    path = app.config['TREE_FILE']
    try:
        doc = load_document(path)
    except StorageError as e:
        logger.warning("Ignoring unreadable tree file: %s", e)
        doc = None

    if doc is not None and STORE.load_from_document(doc):
        logger.info("Loaded OID tree from %s", path)
        return
    if doc is not None:
        logger.warning("Saved tree at %s is invalid (%s); using sample data", path, STORE.error)
    STORE.load_from_flat(sample_nodes())


def persist():
    if not app.config['AUTOSAVE'] or STORE.tree is None:
        return
    try:
        save_document(STORE.tree, app.config['TREE_FILE'])
    except StorageError as e:
        logger.error("Autosave failed: %s", e)


def node_json(node, with_children=True):
    data = node.to_dict()
    if not with_children:
        data.pop('children', None)
        data['childCount'] = len(node.children)
    return data


def error(message, status, **extra):
    return jsonify({"error": message, **extra}), status


# --- Tree ---
@app.route("/api/tree", methods=["GET"])
def get_tree():
    return jsonify({"tree": STORE.to_document(), "view": STORE.view_state()})


@app.route("/api/tree", methods=["POST"])
def load_tree():
    if not STORE.load_from_document(request.get_json(silent=True)):
        return error(STORE.error, 400)
    persist()
    return jsonify({"tree": STORE.to_document(), "view": STORE.view_state()})


@app.route("/api/tree/flat", methods=["POST"])
def load_flat():
    records = request.get_json(silent=True)
    if not isinstance(records, list):
        return error("expected a JSON list of records", 400)
    if not STORE.load_from_flat(records):
        return error(STORE.error, 400)
    persist()
    return jsonify({"tree": STORE.to_document(), "view": STORE.view_state()})


@app.route("/upload", methods=["POST"])
def upload():
    file = request.files.get('file')
    if file is None or file.filename == '':
        return error("no file uploaded", 400)
    try:
        raw = json.loads(file.read().decode('utf-8', errors='ignore'))
    except ValueError as e:
        return error(f"{file.filename} is not valid JSON: {e}", 400)

    # a bare list is treated as flat records, anything else as a tree document
    ok = STORE.load_from_flat(raw) if isinstance(raw, list) else STORE.load_from_document(raw)
    if not ok:
        return error(STORE.error, 400)
    persist()
    return jsonify({"tree": STORE.to_document(), "view": STORE.view_state()})


# --- Search ---
@app.route("/api/search")
def search():
    term = request.args.get("term", "")
    try:
        options = SearchOptions(
            search_in=tuple(request.args.getlist("in")) or SEARCH_FIELDS,
            case_sensitive=request.args.get("case") == "1",
        )
    except ValueError as e:
        return error(str(e), 400)
    hits = STORE.search(term, options)
    return jsonify({"results": [h.to_dict() for h in hits], "view": STORE.view_state()})


@app.route("/api/search/clear", methods=["POST"])
def clear_search():
    STORE.clear_search()
    return jsonify(STORE.view_state())


# --- View state ---
@app.route("/api/select", methods=["POST"])
def select():
    body = request.get_json(silent=True) or {}
    STORE.select_node(body.get("id"))
    return jsonify(STORE.view_state())


@app.route("/api/expand/<node_id>", methods=["POST"])
def toggle_expanded(node_id):
    STORE.toggle_expanded(node_id)
    return jsonify(STORE.view_state())


@app.route("/api/expand-all", methods=["POST"])
def expand_all():
    STORE.expand_all()
    return jsonify(STORE.view_state())


@app.route("/api/collapse-all", methods=["POST"])
def collapse_all():
    STORE.collapse_all()
    return jsonify(STORE.view_state())


# --- Nodes ---
@app.route("/api/node/<node_id>", methods=["GET"])
def get_node(node_id):
    node = STORE.find_node(node_id)
    if node is None:
        return error("Node not found", 404)
    return jsonify({"node": node_json(node, with_children=False), "path": path_to(STORE.roots, node_id)})


@app.route("/api/oid/<oid>", methods=["GET"])
def get_oid(oid):
    node = STORE.find_node_by_oid(oid)
    if node is None:
        return error("OID not found", 404)
    return jsonify({"node": node_json(node, with_children=False), "path": path_to(STORE.roots, node.id)})


@app.route("/api/node", methods=["POST"])
def add_node():
    body = request.get_json(silent=True) or {}
    parent_oid = body.get("parentOid")
    nodes, err = parse_flat_records([body.get("node") or {}])
    if err is not None:
        return error(err.message, 400, field=err.field)
    try:
        added = STORE.add_node(parent_oid, nodes[0])
    except (FormatError, ValueError) as e:
        return error(str(e), 400)
    if not added:
        return error(f"No node with OID {parent_oid}", 404)
    persist()
    return jsonify({"node": node_json(STORE.find_node(nodes[0].id)), "view": STORE.view_state()}), 201


@app.route("/api/node/<node_id>", methods=["PATCH"])
def update_node(node_id):
    body = request.get_json(silent=True) or {}
    if not isinstance(body, dict):
        return error("expected a JSON object of fields", 400)
    rejected = sorted(set(body) - set(PATCHABLE))
    if rejected:
        return error(f"cannot patch field(s): {', '.join(rejected)}", 400)
    try:
        updated = STORE.update_node(node_id, body)
    except (FormatError, ValueError) as e:
        return error(str(e), 400)
    if not updated:
        return error("Node not found", 404)
    persist()
    return jsonify({"node": node_json(STORE.find_node(node_id), with_children=False)})


@app.route("/api/node/<node_id>", methods=["DELETE"])
def remove_node(node_id):
    removed = STORE.remove_node(node_id)
    if removed is None:
        return error("Node not found", 404)
    persist()
    return jsonify({"removed": node_json(removed, with_children=False), "view": STORE.view_state()})


@app.route("/api/custom", methods=["POST"])
def add_custom():
    body = request.get_json(silent=True) or {}
    parent_oid = body.get("parentOid") or app.config['CUSTOM_ARC']
    try:
        node = create_custom_oid(
            STORE, str(body.get("arc", "")), body.get("name", ""),
            description=body.get("description"), parent_oid=parent_oid,
        )
    except DuplicateOIDError as e:
        return error(str(e), 409)
    except (FormatError, ValueError) as e:
        return error(str(e), 400)
    if node is None:
        return error(f"No node with OID {parent_oid}", 404)
    persist()
    return jsonify({"node": node_json(node), "view": STORE.view_state()}), 201


# --- Persistence ---
@app.route("/save", methods=["POST"])
def save():
    if STORE.tree is None:
        return error("Nothing to save", 400)
    try:
        path = save_document(STORE.tree, app.config['TREE_FILE'])
    except StorageError as e:
        return error(str(e), 500)
    return jsonify({"saved": str(path)})


@app.route("/clear", methods=["POST"])
def clear_all():
    STORE.reset()
    logger.info("Cleared the OID tree.")
    return jsonify(STORE.view_state())


# --- Main Execution ---
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    load_tree_from_disk()
    print(f"Ready. Loaded {len(STORE.roots)} root arcs from {app.config['TREE_FILE']}.")
    app.run(host="0.0.0.0", port=5000, debug=True)
