# gplus

Helpers that describe dataclass models to an ORM-style query builder. The
package derives database column names from model fields, reads tag settings
from field metadata, and finds the integer field used for optimistic locking.

The package has two modules: `gplus.naming` and `gplus.schema`.

## Installation

```
pip install gplus
```

## Column naming (`gplus.naming`)

`to_db_name` turns a field name into a snake_case column name. It treats
common initialisms such as `ID`, `API`, `HTTPS` and `XML` as whole words:

```python
from gplus.naming import to_db_name

to_db_name("UserName")     # "user_name"
to_db_name("UserID")       # "user_id"
to_db_name("APIKey")       # "api_key"
to_db_name("HTTPSConfig")  # "https_config"
to_db_name("V2Ray")        # "v2_ray"
to_db_name("user_name")    # "user_name"
to_db_name("")             # ""
```

`ns_column_name` is the naming strategy that the schema helpers use for fields
without an explicit column name. It gives the same results as `to_db_name`.

## Tag settings

`parse_tag_setting(text, sep)` reads a tag string such as
`column:username;primaryKey` into a dictionary. Keys are upper-cased and
stripped, and a key written alone maps to its own name. A separator preceded
by a backslash is kept as part of the entry.

```python
from gplus.schema import parse_tag_setting

parse_tag_setting("column:username;primaryKey", ";")
# {"COLUMN": "username", "PRIMARYKEY": "PRIMARYKEY"}
```

## Describing a model

Models are dataclasses. Tags are kept in each field's `metadata`:

- a tag string under the tag name you pass (for example `"gorm"`), with
  settings such as `column:<name>`, `primaryKey`, `embedded` or `-`;
- `"anonymous": True` to mark an embedded model whose fields belong to the
  outer model;
- `"gplus": "version"` to mark the optimistic-lock field, which must be
  annotated `int`.

Fields whose names start with an underscore are skipped.

```python
from dataclasses import dataclass, field

@dataclass
class Base:
    id: int = field(default=0, metadata={"gorm": "column:id;primaryKey"})

@dataclass
class User:
    base: Base = field(default_factory=Base, metadata={"anonymous": True})
    name: str = field(default="", metadata={"gorm": "column:username"})
    email: str = ""
    version: int = field(default=0, metadata={"gplus": "version"})
    note: str = field(default="", metadata={"gorm": "-"})
```

## Column maps

`reflect_struct_schema(model, tag, label)` accepts a dataclass type or
instance and maps the path of each field (a tuple of attribute names) to its
column name. The column name comes from the `label` setting of the tag
(matched case-insensitively), or from `ns_column_name` when there is none.
Fields tagged `-` are left out. Embedded models, marked `anonymous` or tagged
`embedded`, are walked into; an embed annotated as optional (`Base | None`)
is skipped.

```python
from gplus.schema import reflect_struct_schema

reflect_struct_schema(User, "gorm", "column")
# {("base", "id"): "id", ("name",): "username",
#  ("email",): "email", ("version",): "version"}
```

Results are cached per model type, tag and label; the same dictionary is
returned each time. `clear_schema_cache()` empties this cache and the version
field cache. Passing `None` or anything that is not a dataclass raises
`TypeError`.

`init_ptr_embeds(instance)` fills every optional anonymous embed that is
`None` with a new default instance of its dataclass, and does the same inside
those instances.

`ColumnInfo` is a frozen record of a field path and its column name.

## Optimistic locking

- `find_version_field(model_type)` returns a `VersionFieldInfo` (the field's
  `path` and `column_name`) for the first `int` field marked
  `"gplus": "version"`, looking inside non-optional anonymous embeds, or
  `None` when there is none. The column name comes from the `column` setting
  of the `"gorm"` tag, or from `ns_column_name`.
- `get_version_field(model_type)` does the same and caches the result per type.
- `read_version_value(entity, info)` returns the version as an `int`.
- `write_version_value(entity, info, new_value)` stores a new version.
- `build_update_map(entity, info)` collects the non-zero fields of an entity
  keyed by column name (using the `"gorm"` tag), leaving out primary keys and
  the version field. `info` may be `None`.

```python
from gplus.schema import (
    build_update_map, get_version_field, read_version_value, write_version_value,
)

user = User(base=Base(id=1), name="alice", version=3)
info = get_version_field(User)          # VersionFieldInfo(path=("version",), column_name="version")
read_version_value(user, info)          # 3
write_version_value(user, info, 4)      # user.version == 4
build_update_map(user, info)            # {"username": "alice"}
```

## What the package does not do

It builds no SQL, holds no database connection and runs no queries. It
supplies the naming, column maps and version-field metadata that a query
builder or repository layer would use.

## Running the tests

```
pip install "gplus[test]"
pytest
```