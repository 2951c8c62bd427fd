"""
Database Schema Reference
=========================

This file provides a quick reference for all database tables and columns.
For actual SQLAlchemy models, see: heritage_content/db/models.py

"""

# ============================================================================
# LANGUAGES - Catalog of content languages
# ============================================================================
#
# | Column       | Type              | Constraints                    |
# |--------------|-------------------|--------------------------------|
# | code         | VARCHAR(10)       | PRIMARY KEY                    |
# | native_name  | VARCHAR(100)      | NOT NULL                       |
# | english_name | VARCHAR(100)      | NOT NULL                       |
# | is_active    | BOOLEAN           | NOT NULL, DEFAULT TRUE         |
# | created_at   | TIMESTAMP(TZ)     | NOT NULL, DEFAULT now()        |


# ============================================================================
# CITIES - Base records of cities (untranslated columns only)
# ============================================================================
#
# | Column            | Type          | Constraints                    |
# |-------------------|---------------|--------------------------------|
# | id                | UUID          | PRIMARY KEY                    |
# | slug              | VARCHAR(255)  | NOT NULL, UNIQUE, INDEX        |
# | state             | VARCHAR(100)  | NOT NULL, INDEX                |
# | region            | VARCHAR(50)   | NOT NULL, INDEX                |
# | preview_image_url | TEXT          | NULLABLE (placeholder if null) |
# | created_at        | TIMESTAMP(TZ) | NOT NULL, DEFAULT now()        |
# | updated_at        | TIMESTAMP(TZ) | NOT NULL, DEFAULT now()        |
#
# Translated fields (translations.entity_type = 'city'):
#   name (falls back to slug), state (falls back to state column)
#
# Relationships:
#   - heritage_items: ONE-TO-MANY -> heritage_items.city_id


# ============================================================================
# HERITAGE_ITEMS - Monuments, festivals, cuisine, ... attached to a city
# ============================================================================
#
# | Column              | Type          | Constraints                        |
# |---------------------|---------------|------------------------------------|
# | id                  | UUID          | PRIMARY KEY                        |
# | city_id             | UUID          | NOT NULL, FK(cities.id), INDEX     |
# | category            | VARCHAR(50)   | NOT NULL, INDEX                    |
# | historical_period   | VARCHAR(100)  | NULLABLE                           |
# | thumbnail_image_url | TEXT          | NULLABLE (placeholder if null)     |
# | created_at          | TIMESTAMP(TZ) | NOT NULL, DEFAULT now()            |
# | updated_at          | TIMESTAMP(TZ) | NOT NULL, DEFAULT now()            |
#
# Categories: monuments, temples, festivals, traditions, cuisine,
#             art_forms, historical_events, customs
#
# Translated fields (translations.entity_type = 'heritage'):
#   name, summary, detailed_description, significance
#
# Relationships:
#   - images: ONE-TO-MANY -> images.heritage_id


# ============================================================================
# IMAGES - Ordered gallery of a heritage item
# ============================================================================
#
# | Column            | Type          | Constraints                          |
# |-------------------|---------------|--------------------------------------|
# | id                | UUID          | PRIMARY KEY                          |
# | heritage_id       | UUID          | NOT NULL, FK(heritage_items.id)      |
# | url               | TEXT          | NULLABLE (placeholder if null)       |
# | thumbnail_url     | TEXT          | NULLABLE (placeholder if null)       |
# | storage_path      | TEXT          | NULLABLE (set for uploaded images)   |
# | display_order     | INTEGER       | NOT NULL, DEFAULT 0, CHECK >= 0      |
# | location          | VARCHAR(255)  | NULLABLE                             |
# | historical_period | VARCHAR(100)  | NULLABLE                             |
# | created_at        | TIMESTAMP(TZ) | NOT NULL, DEFAULT now()              |
# | updated_at        | TIMESTAMP(TZ) | NOT NULL, DEFAULT now()              |
#
# Served by ascending display_order, ties broken by ascending id.
#
# Translated fields (translations.entity_type = 'image'):
#   caption, alt_text, description, cultural_context


# ============================================================================
# TRANSLATIONS - One row per (entity, language, field)
# ============================================================================
#
# | Column        | Type          | Constraints                          |
# |---------------|---------------|--------------------------------------|
# | id            | UUID          | PRIMARY KEY                          |
# | entity_type   | VARCHAR(50)   | NOT NULL (city, heritage, image)     |
# | entity_id     | UUID          | NOT NULL                             |
# | language_code | VARCHAR(10)   | NOT NULL, FK(languages.code), INDEX  |
# | field_name    | VARCHAR(50)   | NOT NULL                             |
# | content       | TEXT          | NOT NULL                             |
# | created_at    | TIMESTAMP(TZ) | NOT NULL, DEFAULT now()              |
# | updated_at    | TIMESTAMP(TZ) | NOT NULL, DEFAULT now()              |
#
# UNIQUE (entity_type, entity_id, language_code, field_name)
#   - writes are upserts; the last write wins


# ============================================================================
# INDEXES
# ============================================================================
#
# | Table          | Index                         | Columns                            |
# |----------------|-------------------------------|------------------------------------|
# | cities         | ix_cities_slug (unique)       | slug                               |
# | cities         | ix_cities_state               | state                              |
# | cities         | ix_cities_region              | region                             |
# | heritage_items | ix_heritage_items_city_id     | city_id                            |
# | heritage_items | ix_heritage_items_category    | category                           |
# | heritage_items | idx_heritage_city_category    | city_id, category                  |
# | images         | ix_images_heritage_id         | heritage_id                        |
# | images         | idx_images_heritage_order     | heritage_id, display_order         |
# | translations   | idx_translations_entity       | entity_type, entity_id, language   |
# | translations   | ix_translations_language_code | language_code                      |


# ============================================================================
# SUPPORTED LANGUAGES
# ============================================================================
#
# English plus the 22 scheduled languages of India:
#
#   en English    hi Hindi      bn Bengali    te Telugu     mr Marathi
#   ta Tamil      gu Gujarati   kn Kannada    ml Malayalam  or Odia
#   pa Punjabi    as Assamese   ks Kashmiri   kok Konkani   mni Manipuri
#   ne Nepali     sa Sanskrit   sd Sindhi     ur Urdu       brx Bodo
#   sat Santhali  mai Maithili  doi Dogri


# ============================================================================
# ER DIAGRAM (Text)
# ============================================================================
#
#  ┌──────────────┐
#  │    cities    │
#  ├──────────────┤
#  │ id (PK)      │───────────────────────┐
#  │ slug         │                       │
#  │ state        │                       │
#  │ region       │                       │
#  │ preview_url  │                       │
#  │ timestamps   │                       │
#  └──────────────┘                       │
#                                         │ 1:N
#  ┌────────────────┐                     │
#  │ heritage_items │◄────────────────────┘
#  ├────────────────┤
#  │ id (PK)        │─────────────────────┐
#  │ city_id (FK)   │                     │
#  │ category       │                     │
#  │ period         │                     │
#  │ thumbnail_url  │                     │
#  │ timestamps     │                     │
#  └────────────────┘                     │
#                                         │ 1:N
#  ┌────────────────┐                     │
#  │     images     │◄────────────────────┘
#  ├────────────────┤
#  │ id (PK)        │
#  │ heritage_id    │
#  │ url / thumb    │
#  │ storage_path   │
#  │ display_order  │
#  │ timestamps     │
#  └────────────────┘
#
#  ┌────────────────┐       ┌──────────────┐
#  │  translations  │──────►│  languages   │
#  ├────────────────┤  N:1  ├──────────────┤
#  │ entity_type    │       │ code (PK)    │
#  │ entity_id      │       │ native_name  │
#  │ language_code  │       │ english_name │
#  │ field_name     │       │ is_active    │
#  │ content        │       └──────────────┘
#  └────────────────┘
#    (entity_type, entity_id) points at cities, heritage_items or images
