from typing import Optional, Dict, Any, List
from firebase_admin import firestore
from google.cloud.firestore_v1 import FieldFilter
from ekart.config import collection

COL = "products"

def _with_id(snap) -> Dict[str, Any]:
    data = snap.to_dict() or {}
    data["id"] = snap.id
    return data

def ref(db, product_id: Optional[str] = None):
    col = db.collection(collection(COL))
    return col.document(product_id) if product_id else col.document()

def get(db, product_id: str) -> Optional[Dict[str, Any]]:
    snap = ref(db, product_id).get()
    return _with_id(snap) if snap.exists else None

def find_by_seller_and_name(db, seller_id: str, name: str) -> Optional[Dict[str, Any]]:
    snap = next(
        db.collection(collection(COL))
          .where(filter=FieldFilter("seller_id", "==", seller_id))
          .where(filter=FieldFilter("name", "==", name))
          .limit(1)
          .stream(),
        None,
    )
    return _with_id(snap) if snap else None

def list_active(db, category: Optional[str] = None, seller_id: Optional[str] = None) -> List[Dict[str, Any]]:
    q = db.collection(collection(COL)).where(filter=FieldFilter("is_active", "==", True))
    if category:
        q = q.where(filter=FieldFilter("category", "==", category))
    if seller_id:
        q = q.where(filter=FieldFilter("seller_id", "==", seller_id))
    return [_with_id(d) for d in q.stream()]

def list_by_seller(db, seller_id: str) -> List[Dict[str, Any]]:
    q = db.collection(collection(COL)).where(filter=FieldFilter("seller_id", "==", seller_id))
    return [_with_id(d) for d in q.stream()]

def create(db, product_ref, data: Dict[str, Any]) -> Dict[str, Any]:
    now = firestore.SERVER_TIMESTAMP
    product_ref.set({**data, "created_at": now, "updated_at": now})
    return _with_id(product_ref.get())

def update(db, product_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
    product_ref = ref(db, product_id)
    product_ref.update({**patch, "updated_at": firestore.SERVER_TIMESTAMP})
    return _with_id(product_ref.get())

def delete(db, product_id: str) -> None:
    ref(db, product_id).delete()
