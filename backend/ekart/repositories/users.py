from typing import Optional, Dict, Any, List
from firebase_admin import firestore
from google.cloud.firestore_v1 import FieldFilter
from ekart.config import collection

COL = "users"

def _with_id(snap) -> Dict[str, Any]:
    data = snap.to_dict() or {}
    data["id"] = snap.id
    return data

def get(db, uid: str) -> Optional[Dict[str, Any]]:
    snap = db.collection(collection(COL)).document(uid).get()
    return _with_id(snap) if snap.exists else None

def find_by_email(db, email: str) -> Optional[Dict[str, Any]]:
    snap = next(
        db.collection(collection(COL))
          .where(filter=FieldFilter("email", "==", email.lower()))
          .limit(1)
          .stream(),
        None,
    )
    return _with_id(snap) if snap else None

def create(db, uid: str, user_name: str, email: str, role: str) -> Dict[str, Any]:
    ref = db.collection(collection(COL)).document(uid)
    ref.set({
        "user_name": user_name,
        "email": email.lower(),
        "role": role,
        "profile_image": None,
        "is_verified": False,
        "is_logged_in": False,
        "created_at": firestore.SERVER_TIMESTAMP,
    })
    return _with_id(ref.get())

def update(db, uid: str, patch: Dict[str, Any]) -> None:
    db.collection(collection(COL)).document(uid).update(patch)

def delete(db, uid: str) -> None:
    db.collection(collection(COL)).document(uid).delete()

def list_unverified(db) -> List[Dict[str, Any]]:
    q = db.collection(collection(COL)).where(filter=FieldFilter("is_verified", "==", False))
    return [_with_id(d) for d in q.stream()]
