"""Serializers for clubs, members and teams."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Club, Member, Team


class ClubSerializer(serializers.ModelSerializer):
    class Meta:
        model = Club
        fields = [
            "id",
            "name",
            "short_name",
            "description",
            "address",
            "phone",
            "email",
            "website",
            "founded_year",
            "timezone",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]


class MemberSerializer(serializers.ModelSerializer):
    full_name = serializers.ReadOnlyField()

    class Meta:
        model = Member
        fields = [
            "id",
            "club",
            "first_name",
            "last_name",
            "full_name",
            "email",
            "phone",
            "birth_date",
            "address",
            "membership_number",
            "status",
            "join_date",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "club", "full_name", "created_at", "updated_at"]


class TeamSerializer(serializers.ModelSerializer):
    class Meta:
        model = Team
        fields = [
            "id",
            "club",
            "name",
            "category",
            "age_group",
            "gender",
            "description",
            "max_members",
            "status",
            "season",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "club", "created_at", "updated_at"]
