import os
import sys

import requests
import concurrent.futures
import argparse
from uuid import uuid4

BASE = os.environ.get("CART_BASE", "http://127.0.0.1:5000")


def add_task(i, email, product_id, qty):
    payload = {
        "user_email": email,
        "product_id": product_id,
        "product_name": "Concurrency Test Item",
        "price": 9.99,
        "quantity": qty,
        "image_url": None,
    }
    try:
        r = requests.post(f"{BASE}/cart", json=payload, timeout=10)
        return (i, r.status_code, r.text)
    except requests.RequestException as e:
        return (i, "ERR", str(e))


def run_add_concurrent(workers, email, product_id, qty):
    print(f"Running merge-add test: workers={workers}, email={email}, product_id={product_id}, qty={qty}")
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as ex:
        futures = [ex.submit(add_task, i, email, product_id, qty) for i in range(workers)]
        results = [f.result() for f in futures]
    for r in results:
        print(r)

    ok = sum(1 for r in results if r[1] == 200)
    lines = requests.get(f"{BASE}/cart/{email}", timeout=10).json()
    matching = [l for l in lines if l["product_id"] == product_id]
    print(f"successful adds: {ok}/{workers}")
    print(f"lines for product: {len(matching)} (expected 1)")
    if matching:
        print(f"quantity: {matching[0]['quantity']} (expected {ok * qty})")
    return len(matching) == 1 and matching[0]["quantity"] == ok * qty


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Fire concurrent POST /cart calls for one customer/product pair.")
    parser.add_argument("--workers", type=int, default=8)
    parser.add_argument("--email", default=None)
    parser.add_argument("--product-id", default="CONC-1")
    parser.add_argument("--qty", type=int, default=1)
    parser.add_argument("--keep", action="store_true", help="do not clear the test cart afterwards")
    args = parser.parse_args()

    email = args.email or f"concurrency-{uuid4().hex[:8]}@example.com"
    passed = run_add_concurrent(args.workers, email, args.product_id, args.qty)
    if not args.keep:
        requests.delete(f"{BASE}/cart/clear/{email}", timeout=10)
    sys.exit(0 if passed else 1)
