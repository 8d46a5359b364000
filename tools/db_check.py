import sqlite3
import sys

DB = sys.argv[1] if len(sys.argv) > 1 else "dev.db"
EMAIL = sys.argv[2] if len(sys.argv) > 2 else None

conn = sqlite3.connect(DB)
cur = conn.cursor()

if EMAIL:
    print(f"=== Cart for {EMAIL} ===")
    cur.execute(
        "SELECT id, product_id, product_name, price, quantity, created_at FROM cart WHERE user_email=? ORDER BY created_at DESC",
        (EMAIL,),
    )
else:
    print("=== Recent cart lines ===")
    cur.execute(
        "SELECT id, user_email, product_id, product_name, price, quantity, created_at FROM cart ORDER BY created_at DESC LIMIT 20"
    )
for r in cur.fetchall():
    print(r)

# more than one line per (user_email, product_id) means a merge-add raced
print("\n=== Duplicate lines ===")
cur.execute(
    "SELECT user_email, product_id, COUNT(*), SUM(quantity) FROM cart GROUP BY user_email, product_id HAVING COUNT(*) > 1"
)
dupes = cur.fetchall()
for r in dupes:
    print(r)
if not dupes:
    print("none")

conn.close()
