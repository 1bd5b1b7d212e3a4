"""
Order Transaction Engine
========================

Creates orders against current stock as one all-or-nothing unit:

1. validate the request (no datastore access),
2. inside a single write transaction, read one snapshot of the requested
   cakes, check stock and compute the total from snapshot prices,
3. insert the order and its items, decrement stock, commit.

Any failure after step 2 begins rolls back every write, so callers never
observe a partial order or a partial stock change.
"""

import logging
import sqlite3
from collections import OrderedDict

from ...core.errors import ConflictError, InternalError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ORDER_STATUSES = ('pending', 'processing', 'completed', 'cancelled')


def _parse_int(value):
    """int for ints and integral strings/floats, None for anything else"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def normalize_items(items):
    """
    Turn a raw items payload into ``[(cake_id, quantity), ...]``.

    Entries whose cake_id or quantity don't parse as integers, or whose
    quantity isn't positive, are dropped.
    """
    lines = []
    for item in items:
        if not isinstance(item, dict):
            continue
        cake_id = _parse_int(item.get('cake_id'))
        quantity = _parse_int(item.get('quantity'))
        if cake_id is None or quantity is None or quantity <= 0:
            continue
        lines.append((cake_id, quantity))
    return lines


def _clean_text(value):
    if value is None:
        return ''
    return str(value).strip()


class OrderEngine:
    """Order creation, status changes and deletion over the shared Database"""

    def __init__(self, db):
        self.db = db

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_order(self, customer_name, customer_phone, items):
        customer_name = _clean_text(customer_name)
        customer_phone = _clean_text(customer_phone)
        if not customer_name or not customer_phone:
            raise ValidationError('missing customer info')

        if not isinstance(items, (list, tuple)) or not items:
            raise ValidationError('missing items')

        lines = normalize_items(items)
        if not lines:
            raise ValidationError('no valid items')

        cake_ids = list(OrderedDict.fromkeys(cake_id for cake_id, _ in lines))

        try:
            with self.db.transaction() as conn:
                snapshot = self._read_snapshot(conn, cake_ids)
                total_price = self._check_stock(snapshot, lines)
                order_id = self._write_order(conn, customer_name, customer_phone,
                                             total_price, snapshot, lines)
        except sqlite3.Error as e:
            logger.error(f"Order transaction failed and was rolled back: {e}")
            raise InternalError('Failed to create order') from e

        logger.info(f"Created order {order_id} for {customer_name} (total {total_price})")
        return self.get_order(order_id)

    @staticmethod
    def _read_snapshot(conn, cake_ids):
        placeholders = ','.join('?' * len(cake_ids))
        rows = conn.execute(
            f'SELECT id, name, price, stock, is_available FROM cakes WHERE id IN ({placeholders})',
            cake_ids
        ).fetchall()

        if len(rows) < len(cake_ids):
            raise NotFoundError('one or more cakes not found')

        return {row['id']: dict(row) for row in rows}

    @staticmethod
    def _check_stock(snapshot, lines):
        """Validate every line against the snapshot and return the order total"""
        requested = {}
        total_price = 0
        for cake_id, quantity in lines:
            cake = snapshot.get(cake_id)
            if cake is None:
                raise NotFoundError('one or more cakes not found')

            # Lines for the same cake draw from the same stock
            requested[cake_id] = requested.get(cake_id, 0) + quantity
            if requested[cake_id] > cake['stock']:
                raise ConflictError(f"insufficient stock for {cake['name']}")

            total_price += cake['price'] * quantity
        return total_price

    @staticmethod
    def _write_order(conn, customer_name, customer_phone, total_price, snapshot, lines):
        cursor = conn.execute(
            'INSERT INTO orders (customer_name, customer_phone, total_price, status) VALUES (?, ?, ?, ?)',
            (customer_name, customer_phone, total_price, 'pending')
        )
        order_id = cursor.lastrowid

        remaining = {cake_id: cake['stock'] for cake_id, cake in snapshot.items()}
        for cake_id, quantity in lines:
            cake = snapshot[cake_id]
            conn.execute(
                'INSERT INTO order_items (order_id, cake_id, cake_name, quantity, price) VALUES (?, ?, ?, ?, ?)',
                (order_id, cake_id, cake['name'], quantity, cake['price'])
            )

            new_stock = remaining[cake_id] - quantity
            updated = conn.execute(
                'UPDATE cakes SET stock = ?, is_available = ? WHERE id = ? AND stock = ?',
                (new_stock, 1 if new_stock > 0 else 0, cake_id, remaining[cake_id])
            )
            if updated.rowcount != 1:
                raise ConflictError(f"stock changed while ordering {cake['name']}")
            remaining[cake_id] = new_stock

        return order_id

    # ------------------------------------------------------------------
    # Status / delete
    # ------------------------------------------------------------------

    def update_status(self, order_id, status):
        """Set any of the allowed statuses from any other status"""
        if status not in ORDER_STATUSES:
            raise ValidationError(f"Invalid status, expected one of: {', '.join(ORDER_STATUSES)}")

        with self.db.transaction() as conn:
            updated = conn.execute('UPDATE orders SET status = ? WHERE id = ?', (status, order_id))
            if updated.rowcount == 0:
                raise NotFoundError('Order not found')

        logger.info(f"Order {order_id} status -> {status}")
        return self.get_order(order_id)

    def delete_order(self, order_id):
        """
        Delete an order and its items as one unit.

        Stock is not restored; this removes records, it is not a cancellation.
        """
        with self.db.transaction() as conn:
            existing = conn.execute('SELECT id FROM orders WHERE id = ?', (order_id,)).fetchone()
            if existing is None:
                raise NotFoundError('Order not found')

            deleted_items = conn.execute(
                'DELETE FROM order_items WHERE order_id = ?', (order_id,)
            ).rowcount
            conn.execute('DELETE FROM orders WHERE id = ?', (order_id,))

        logger.info(f"Deleted order {order_id} ({deleted_items} items)")
        return deleted_items

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_order(self, order_id):
        order = self.db.query('SELECT * FROM orders WHERE id = ?', (order_id,), one=True)
        if order is None:
            raise NotFoundError('Order not found')

        order['items'] = self.db.query('''
            SELECT id, cake_id, cake_name, quantity, price, price * quantity AS subtotal
            FROM order_items
            WHERE order_id = ?
            ORDER BY id
        ''', (order_id,))
        return order

    def list_orders(self, limit=None):
        """Orders newest first, each with an ``items_summary`` like "Lapis x2, Klepon x1" """
        sql = '''
            SELECT o.*,
                   (SELECT GROUP_CONCAT(oi.cake_name || ' x' || oi.quantity, ', ')
                    FROM order_items oi
                    WHERE oi.order_id = o.id) AS items_summary
            FROM orders o
            ORDER BY o.created_at DESC, o.id DESC
        '''
        params = ()
        if limit is not None:
            sql += ' LIMIT ?'
            params = (limit,)
        return self.db.query(sql, params)

    def count(self):
        return self.db.query('SELECT COUNT(*) AS total FROM orders', one=True)['total']
