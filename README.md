# lineagekit

Supporting utilities for schema lineage tooling and Go code generation:
naming helpers, OpenAPI `$ref` and path-template handling, lacuna records,
and a small framework for tests whose inputs and expected outputs live in
txtar archives. Pure Python, no dependencies.

## Install

```
pip install lineagekit
pip install "lineagekit[test]"   # adds pytest for running the test suite
```

## Modules

- `lineagekit.naming`: Go identifiers and comments.
  `to_camel_case`, `schema_name_to_type_name`, `path_to_type_name`,
  `uppercase_first_character`, `uppercase_first_character_with_pkg_name`,
  `lowercase_first_character`, `is_go_keyword`, `is_predeclared_go_identifier`,
  `is_go_identity`, `is_valid_go_identity`, `sanitize_go_identity`,
  `sanitize_enum_names`, `string_to_go_comment`,
  `string_with_type_name_to_go_comment`, `deprecation_comment`.
- `lineagekit.refs`: OpenAPI references and path templates.
  `ref_path_to_go_type(ref_path, import_mapping, schema_names)` (raises
  `ValueError` for malformed, too deep or unmapped references),
  `ref_path_to_obj_name`, `is_go_type_reference`, `is_whole_document_reference`,
  `swagger_uri_to_echo_uri`, `swagger_uri_to_fiber_uri`, `swagger_uri_to_chi_uri`,
  `swagger_uri_to_gin_uri`, `swagger_uri_to_gorilla_uri`,
  `ordered_params_from_uri`, `replace_path_params_with_str`,
  `escape_path_elements`, `sorted_keys`, `string_in_array`.
- `lineagekit.cli_maps`: `parse_commandline_map` (`key:value,...` with
  double-quoted parts protected), `parse_commandline_list`, `split_string`,
  `is_media_type_json`.
- `lineagekit.labels`: `sanitize_label_string`, `must_quote`, `rand_seq`,
  and `to_overlay(prefix, root)`, which maps every file of a directory or of a
  `{name: bytes}` mapping to its contents under an absolute path prefix.
- `lineagekit.lacuna`: `Lacuna`, `FieldRef` and `FlatLacunas`, describing gaps
  in a translation between schema versions, with `to_dict` / `from_dict` for
  their JSON form.
- `lineagekit.envvars`: `EnvSettings.from_environ()` reads
  `THEMA_UPDATE_GOLDEN`, `THEMA_FORCEVERIFY`, `THEMA_FORMAT_TXTAR` and
  `THEMA_FIX_TXTAR_LINEAGES`; a switch is on when set to any non-empty value.
- `lineagekit.txtar`: `parse`, `parse_file`, `format_archive`, `dedupe`,
  `clean_outputs` (strips `out...` files from every `.txtar` under a directory),
  and the `Archive` / `File` classes. `Archive.has_tag`, `Archive.value` and
  `Archive.bool_value` read `#tag` and `#key: value` lines from the comment.
- `lineagekit.golden`: `GoldenRecorder` collects named outputs and `merge`s
  them into an archive, raising `GoldenMismatch` on differences;
  `iter_txtar_cases`, `test_name_from_path`, `exemplar_name_from_path`,
  `skip_reason`.
- `lineagekit.suite`: `TxtarSuite` runs a function over every `.txtar` case
  under a `testdata` directory, handing it a `SuiteCase`; `vanilla_overlay`
  builds load arguments and a file overlay from an archive.

## Examples

```python
from lineagekit.naming import schema_name_to_type_name, to_camel_case
from lineagekit.refs import ref_path_to_go_type, swagger_uri_to_echo_uri
from lineagekit.cli_maps import parse_commandline_map

schema_name_to_type_name("123")                # "N123"
to_camel_case("number-1234")                   # "Number1234"
swagger_uri_to_echo_uri("/path/{arg*}")        # "/path/:arg"
ref_path_to_go_type("doc.json#/foo", {"doc.json": "externalRef0"})  # "externalRef0.Foo"
parse_commandline_map('key1:"a,b",key2:c')     # {"key1": "a,b", "key2": "c"}
```

### Txtar archives

```python
from lineagekit.txtar import parse, format_archive

archive = parse(b"#skip\n-- a.cue --\nx: 1\n-- out/bind --\nok\n")
archive.has_tag("skip")                        # True
format_archive(archive.without_outputs())      # b"#skip\n-- a.cue --\nx: 1\n"
```

### Golden-file suites

```python
from lineagekit.suite import TxtarSuite

def check(case):
    case.write(f"files: {len(case.archive.files)}\n")

TxtarSuite(root="testdata/lineage", name="bind").run(check)
```

Each case's main output is compared with the `out/bind` file in its archive,
and output written through `case.writer("sub")` with `out/bind/sub`.
Differences raise `GoldenMismatch` once all cases have run. Cases tagged
`#skip` (or `#slow` with `short=True`) or listed in `skip` / `todo` are not
run. When `update` is true, or left unset with `THEMA_UPDATE_GOLDEN` set to a
non-empty value, differing golden files are rewritten in place instead.

## What it does not do

lineagekit does not evaluate CUE, bind or validate lineages, translate
instances between schema versions, or load OpenAPI documents; `vanilla_overlay`
and `to_overlay` only prepare file maps for a loader that lives elsewhere.
`EnvSettings` reads the `THEMA_FORMAT_TXTAR` switch but nothing in the package
reformats archived inputs. There is no command-line tool.