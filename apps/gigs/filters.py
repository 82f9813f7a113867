from __future__ import annotations

import django_filters

from .models import Gig, GigType


class GigFilter(django_filters.FilterSet):
    type = django_filters.ChoiceFilter(choices=GigType.choices)
    company = django_filters.CharFilter(field_name="company", lookup_expr="iexact")
    username = django_filters.CharFilter(field_name="username", lookup_expr="iexact")
    winners_announced = django_filters.BooleanFilter()
    deadline_after = django_filters.IsoDateTimeFilter(field_name="deadline", lookup_expr="gte")

    class Meta:
        model = Gig
        fields = ["type", "company", "username", "winners_announced"]
