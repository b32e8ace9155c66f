"""Repository operations shared by every content model.

Each model exposes them through ``Model.objects``: insert, find_many,
find_by_id, update_by_id, delete_by_id, plus the bulk helpers the content rules
need (collection-wide flag reset and manual reordering).
"""

from django.db import models, transaction

from .exceptions import EntityNotFound


class ContentQuerySet(models.QuerySet):
    def find_many(self, filters=None, ordering=None):
        qs = self.filter(**(filters or {}))
        if ordering:
            qs = qs.order_by(*ordering)
        return qs

    def find_by_id(self, pk):
        try:
            return self.get(pk=pk)
        except (self.model.DoesNotExist, ValueError, TypeError):
            raise EntityNotFound(self.model, pk)

    def deactivate_all(self, field):
        """Unconditionally set a boolean ``field`` to False on every row."""
        return self.update(**{field: False})


class ContentManager(models.Manager.from_queryset(ContentQuerySet)):
    def insert(self, **fields):
        return self.create(**fields)

    def update_by_id(self, pk, **fields):
        obj = self.find_by_id(pk)
        for name, value in fields.items():
            setattr(obj, name, value)
        obj.save()
        return obj

    def delete_by_id(self, pk):
        self.find_by_id(pk).delete()

    def reorder(self, items):
        """Apply ``[{"id": .., "order": ..}, ...]`` order weights; returns rows touched."""
        touched = 0
        with transaction.atomic():
            for item in items:
                touched += self.filter(pk=item["id"]).update(order=int(item["order"]))
        return touched
