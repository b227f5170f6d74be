from typing import Optional, Dict, Any
from firebase_admin import firestore
from ekart.config import collection

COL = "profiles"

def ref(db, user_id: str):
    # document id == user uid: one profile per user
    return db.collection(collection(COL)).document(user_id)

def get(db, user_id: str) -> Optional[Dict[str, Any]]:
    snap = ref(db, user_id).get()
    if not snap.exists:
        return None
    data = snap.to_dict() or {}
    data["id"] = snap.id
    return data

def create_blank(db, user_id: str) -> None:
    now = firestore.SERVER_TIMESTAMP
    ref(db, user_id).set({
        "user_id": user_id,
        "address": None,
        "business_name": None,
        "gst_number": None,
        "seller_rating": 0,
        "created_at": now,
        "updated_at": now,
    })

def upsert(db, user_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
    profile_ref = ref(db, user_id)
    if not profile_ref.get().exists:
        create_blank(db, user_id)
    profile_ref.set({**patch, "updated_at": firestore.SERVER_TIMESTAMP}, merge=True)
    return get(db, user_id)

def delete(db, user_id: str) -> None:
    ref(db, user_id).delete()
