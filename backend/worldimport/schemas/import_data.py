"""Schemas for the ``import.json`` batch (users, levels, relations, assets)."""

from __future__ import annotations

from typing import Any

from marshmallow import fields, post_load

from worldimport.schemas.common import EMPTY_OBJECT_ID, CaseInsensitiveSchema, ObjectIdField


class UserImportSchema(CaseInsensitiveSchema):
    """One exported user. Missing ids load as the empty sentinel."""

    user_id = ObjectIdField(load_default=EMPTY_OBJECT_ID)
    username = fields.String(allow_none=True, load_default=None)
    email_address = fields.String(allow_none=True, load_default=None)
    password_bcrypt = fields.String(allow_none=True, load_default=None)
    email_address_verified = fields.Boolean(load_default=False)
    should_reset_password = fields.Boolean(load_default=False)
    icon_hash = fields.String(allow_none=True, load_default=None)
    force_match = ObjectIdField(allow_none=True, load_default=None)
    psp_icon_hash = fields.String(allow_none=True, load_default=None)
    vita_icon_hash = fields.String(allow_none=True, load_default=None)
    beta_icon_hash = fields.String(allow_none=True, load_default=None)
    filesize_quota_usage = fields.Integer(load_default=0)
    description = fields.String(allow_none=True, load_default=None)
    location_x = fields.Integer(load_default=0)
    location_y = fields.Integer(load_default=0)
    join_date = fields.DateTime(allow_none=True, load_default=None)
    beta_planets_hash = fields.String(allow_none=True, load_default=None)
    lbp2_planets_hash = fields.String(allow_none=True, load_default=None)
    lbp3_planets_hash = fields.String(allow_none=True, load_default=None)
    vita_planets_hash = fields.String(allow_none=True, load_default=None)
    yay_face_hash = fields.String(allow_none=True, load_default=None)
    boo_face_hash = fields.String(allow_none=True, load_default=None)
    meh_face_hash = fields.String(allow_none=True, load_default=None)
    allow_ip_authentication = fields.Boolean(load_default=False)
    ban_reason = fields.String(allow_none=True, load_default=None)
    ban_expiry_date = fields.DateTime(allow_none=True, load_default=None)
    last_login_date = fields.DateTime(allow_none=True, load_default=None)
    rpcn_authentication_allowed = fields.Boolean(load_default=False)
    psn_authentication_allowed = fields.Boolean(load_default=False)
    profile_visibility = fields.Integer(load_default=0)
    level_visibility = fields.Integer(load_default=0)
    presence_server_auth_token = fields.String(allow_none=True, load_default=None)
    unescape_xml_sequences = fields.Boolean(load_default=False)
    show_modded_content = fields.Boolean(load_default=False)
    role = fields.Integer(load_default=0)


class LevelImportSchema(CaseInsensitiveSchema):
    """One exported level. The publisher reference is never read."""

    level_id = fields.Integer(load_default=0)
    is_adventure = fields.Boolean(load_default=False)
    title = fields.String(allow_none=True, load_default=None)
    icon_hash = fields.String(allow_none=True, load_default=None)
    description = fields.String(allow_none=True, load_default=None)
    location_x = fields.Integer(load_default=0)
    location_y = fields.Integer(load_default=0)
    root_resource = fields.String(allow_none=True, load_default=None)
    publish_date = fields.DateTime(allow_none=True, load_default=None)
    update_date = fields.DateTime(allow_none=True, load_default=None)
    min_players = fields.Integer(load_default=0)
    max_players = fields.Integer(load_default=0)
    enforce_min_max_players = fields.Boolean(load_default=False)
    same_screen_game = fields.Boolean(load_default=False)
    date_team_picked = fields.DateTime(allow_none=True, load_default=None)
    is_modded = fields.Boolean(load_default=False)
    background_guid = fields.String(allow_none=True, load_default=None)
    game_version = fields.Integer(load_default=0)
    level_type = fields.Integer(load_default=0)
    story_id = fields.Integer(load_default=0)
    is_locked = fields.Boolean(load_default=False)
    is_sub_level = fields.Boolean(load_default=False)
    is_copyable = fields.Boolean(load_default=False)
    score = fields.Float(load_default=0.0)
    original_publisher = fields.String(allow_none=True, load_default=None)
    is_re_upload = fields.Boolean(load_default=False)


class RelationImportSchema(CaseInsensitiveSchema):
    """One asset dependency edge."""

    dependent = fields.String(required=True)
    dependency = fields.String(required=True)


class AssetImportSchema(CaseInsensitiveSchema):
    """One exported asset. The uploader reference is never read."""

    asset_hash = fields.String(required=True)
    upload_date = fields.DateTime(allow_none=True, load_default=None)
    is_psp = fields.Boolean(load_default=False)
    size_in_bytes = fields.Integer(load_default=0)
    asset_type = fields.Integer(load_default=0)
    asset_serialization_method = fields.Integer(load_default=0)
    dependencies = fields.List(fields.String(), allow_none=True, load_default=list)
    as_mainline_icon_hash = fields.String(allow_none=True, load_default=None)
    as_mip_icon_hash = fields.String(allow_none=True, load_default=None)
    as_mainline_photo_hash = fields.String(allow_none=True, load_default=None)


class ImportDataSchema(CaseInsensitiveSchema):
    """Top-level batch: four arrays, each optional, ``null`` read as empty."""

    users = fields.List(fields.Nested(UserImportSchema), allow_none=True, load_default=list)
    levels = fields.List(fields.Nested(LevelImportSchema), allow_none=True, load_default=list)
    relations = fields.List(
        fields.Nested(RelationImportSchema), allow_none=True, load_default=list
    )
    assets = fields.List(fields.Nested(AssetImportSchema), allow_none=True, load_default=list)

    @post_load
    def empty_lists(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        for key in ("users", "levels", "relations", "assets"):
            if data.get(key) is None:
                data[key] = []
        return data
