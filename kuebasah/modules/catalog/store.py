"""
Catalog Store
=============

CRUD and filtering over cake records. Writes go through the shared
``Database`` write transaction; reads are plain and may be slightly stale.
"""

import logging
import math

from ...core.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('name', 'description', 'price', 'category', 'image', 'stock', 'is_available')


def _cake(row):
    """Row -> JSON-ready dict"""
    if row is None:
        return None
    cake = dict(row)
    cake['is_available'] = bool(cake['is_available'])
    return cake


def _blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def parse_price(value):
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise ValidationError('Price must be a number')
    if not math.isfinite(price):
        raise ValidationError('Price must be a number')
    if price < 0:
        raise ValidationError('Price must not be negative')
    return price


def parse_stock(value):
    try:
        stock = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError('Stock must be a whole number')
    if stock < 0:
        raise ValidationError('Stock must not be negative')
    return stock


def parse_flag(value):
    """Accept form-style booleans ("true"/"1"/"on") and real ones"""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() in ('true', '1', 'yes', 'on')


class CatalogStore:
    """Cake listings backed by the ``cakes`` table"""

    def __init__(self, db):
        self.db = db

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_available(self):
        rows = self.db.query(
            'SELECT * FROM cakes WHERE is_available = 1 ORDER BY created_at DESC, id DESC'
        )
        return [_cake(r) for r in rows]

    def list_all(self):
        rows = self.db.query('SELECT * FROM cakes ORDER BY created_at DESC, id DESC')
        return [_cake(r) for r in rows]

    def get(self, cake_id, available_only=False):
        sql = 'SELECT * FROM cakes WHERE id = ?'
        if available_only:
            sql += ' AND is_available = 1'
        return _cake(self.db.query(sql, (cake_id,), one=True))

    def by_category(self, category):
        rows = self.db.query(
            'SELECT * FROM cakes WHERE category = ? AND is_available = 1 ORDER BY name',
            (category,)
        )
        return [_cake(r) for r in rows]

    def search(self, query):
        """Case-insensitive substring match over name or description"""
        needle = (query or '').strip().lower()
        if not needle:
            return []

        # instr() keeps % and _ in the query literal, unlike LIKE
        rows = self.db.query('''
            SELECT * FROM cakes
            WHERE (instr(lower(name), ?) > 0 OR instr(lower(description), ?) > 0)
              AND is_available = 1
            ORDER BY name
        ''', (needle, needle))
        return [_cake(r) for r in rows]

    def get_many(self, cake_ids, available_only=False):
        """Map of id -> cake for the given ids (missing ids are simply absent)"""
        ids = sorted(set(cake_ids))
        if not ids:
            return {}
        placeholders = ','.join('?' * len(ids))
        sql = f'SELECT * FROM cakes WHERE id IN ({placeholders})'
        if available_only:
            sql += ' AND is_available = 1'
        return {row['id']: _cake(row) for row in self.db.query(sql, ids)}

    def stats(self):
        row = self.db.query('''
            SELECT COUNT(*) AS total_cakes,
                   COALESCE(SUM(CASE WHEN is_available = 1 THEN 1 ELSE 0 END), 0) AS available_cakes,
                   COALESCE(SUM(stock), 0) AS total_stock
            FROM cakes
        ''', one=True)
        return row

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, name=None, description=None, price=None, category=None, image=None,
               stock=None, is_available=None):
        """Insert a cake and return it. Stock defaults to 1."""
        values = {
            'name': name,
            'description': description,
            'category': category,
            'image': image,
        }
        missing = [field for field, value in values.items() if _blank(value)]
        if missing or _blank(price):
            raise ValidationError('Name, description, price, category and image are required')

        values = {field: str(value).strip() for field, value in values.items()}
        values['price'] = parse_price(price)
        values['stock'] = 1 if _blank(stock) else parse_stock(stock)
        if _blank(is_available):
            values['is_available'] = values['stock'] > 0
        else:
            values['is_available'] = parse_flag(is_available)

        with self.db.transaction() as conn:
            cursor = conn.execute('''
                INSERT INTO cakes (name, description, price, category, image, stock, is_available)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            ''', (values['name'], values['description'], values['price'], values['category'],
                  values['image'], values['stock'], int(values['is_available'])))
            cake_id = cursor.lastrowid
            row = conn.execute('SELECT * FROM cakes WHERE id = ?', (cake_id,)).fetchone()

        logger.info(f"Created cake {cake_id} ({values['name']})")
        return _cake(row)

    def update(self, cake_id, **fields):
        """
        Partial update. Blank or missing fields keep their current value.

        An explicit ``is_available`` always wins; otherwise a stock change
        recomputes availability from the new stock.
        """
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

        changes = {}
        for field in ('name', 'description', 'category', 'image'):
            if not _blank(fields.get(field)):
                changes[field] = str(fields[field]).strip()
        if not _blank(fields.get('price')):
            changes['price'] = parse_price(fields['price'])
        if not _blank(fields.get('stock')):
            changes['stock'] = parse_stock(fields['stock'])

        if not _blank(fields.get('is_available')):
            changes['is_available'] = int(parse_flag(fields['is_available']))
        elif 'stock' in changes:
            changes['is_available'] = int(changes['stock'] > 0)

        with self.db.transaction() as conn:
            existing = conn.execute('SELECT id FROM cakes WHERE id = ?', (cake_id,)).fetchone()
            if existing is None:
                raise NotFoundError('Cake not found')

            if changes:
                assignments = ', '.join(f'{field} = ?' for field in changes)
                conn.execute(f'UPDATE cakes SET {assignments} WHERE id = ?',
                             (*changes.values(), cake_id))
            row = conn.execute('SELECT * FROM cakes WHERE id = ?', (cake_id,)).fetchone()

        return _cake(row)

    def delete(self, cake_id):
        """
        Remove a cake unconditionally and return the deleted record.

        Order items keep their own name/price snapshot, so existing orders
        stay intact when the cake they reference disappears.
        """
        with self.db.transaction() as conn:
            row = conn.execute('SELECT * FROM cakes WHERE id = ?', (cake_id,)).fetchone()
            if row is None:
                raise NotFoundError('Cake not found')
            conn.execute('DELETE FROM cakes WHERE id = ?', (cake_id,))

        logger.info(f"Deleted cake {cake_id}")
        return _cake(row)
