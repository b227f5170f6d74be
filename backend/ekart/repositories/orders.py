from typing import Optional, Dict, Any, List
from google.cloud.firestore_v1 import FieldFilter
from ekart.config import collection
from ekart.utils.timestamps import newest_first

COL = "orders"

def _with_id(snap) -> Dict[str, Any]:
    data = snap.to_dict() or {}
    data["id"] = snap.id
    return data

def new_ref(db):
    return db.collection(collection(COL)).document()

def get(db, order_id: str) -> Optional[Dict[str, Any]]:
    snap = db.collection(collection(COL)).document(order_id).get()
    return _with_id(snap) if snap.exists else None

def list_for_buyer(db, buyer_id: str) -> List[Dict[str, Any]]:
    q = db.collection(collection(COL)).where(filter=FieldFilter("buyer_id", "==", buyer_id))
    return newest_first([_with_id(d) for d in q.stream()])

def list_for_seller(db, seller_id: str) -> List[Dict[str, Any]]:
    # seller_ids is denormalized at checkout; nested item maps are not queryable
    q = db.collection(collection(COL)).where(filter=FieldFilter("seller_ids", "array_contains", seller_id))
    return newest_first([_with_id(d) for d in q.stream()])
