import string
from rustgrpc.settings import PROTO_FILE_SUFFIX

# Strict, reserved and edition-reserved Rust keywords. An identifier equal to
# one of these must be written as a raw identifier (`r#fn`).
RUST_KEYWORDS = frozenset(
    [
        'as',
        'async',
        'await',
        'break',
        'const',
        'continue',
        'crate',
        'dyn',
        'else',
        'enum',
        'extern',
        'false',
        'fn',
        'for',
        'gen',
        'if',
        'impl',
        'in',
        'let',
        'loop',
        'match',
        'mod',
        'move',
        'mut',
        'pub',
        'ref',
        'return',
        'self',
        'Self',
        'static',
        'struct',
        'super',
        'trait',
        'true',
        'try',
        'type',
        'unsafe',
        'use',
        'where',
        'while',
        # Reserved for future use.
        'abstract',
        'become',
        'box',
        'do',
        'final',
        'macro',
        'override',
        'priv',
        'typeof',
        'unsized',
        'virtual',
        'yield',
    ]
)

# Keywords that Rust refuses even with the `r#` prefix.
NON_RAW_KEYWORDS = frozenset(['crate', 'self', 'super', 'Self'])

MANGLED_SUFFIX = '__mangled_because_ident_isnt_a_legal_raw_identifier'


def to_upper_camel_case(input: str) -> str:
    """Convert e.g. 'greeter_service' (or 'greeterService') to
    'GreeterService'.

    Characters that are neither letters nor digits are dropped and capitalize
    the letter that follows them; so does a digit.
    """
    result = []
    capitalize_next = True
    for c in input:
        if c in string.ascii_lowercase:
            result.append(c.upper() if capitalize_next else c)
            capitalize_next = False
        elif c in string.ascii_uppercase:
            result.append(c)
            capitalize_next = False
        elif c in string.digits:
            result.append(c)
            capitalize_next = True
        else:
            capitalize_next = True
    return ''.join(result)


def to_snake_case(input: str) -> str:
    """Convert e.g. 'SayHello' to 'say_hello'.

    Every upper case letter starts a new word, so acronyms are split letter by
    letter: 'GetHTTP' becomes 'get_h_t_t_p'. Existing underscores are kept and
    never doubled.
    """
    result = []
    last_char_was_underscore = False
    for index, c in enumerate(input):
        if (
            index > 0 and c in string.ascii_uppercase and
            not last_char_was_underscore
        ):
            result.append('_')
        last_char_was_underscore = c == '_'
        result.append(c.lower() if c in string.ascii_uppercase else c)
    return ''.join(result)


def to_safe_identifier(name: str) -> str:
    """Returns `name` in a form that can be used as a Rust identifier.

    Keywords become raw identifiers, except the few that Rust does not accept
    as raw identifiers; those get a suffix instead. Anything else is returned
    unchanged, which makes the function idempotent.
    """
    if name in NON_RAW_KEYWORDS:
        return f'{name}{MANGLED_SUFFIX}'
    if name in RUST_KEYWORDS:
        return f'r#{name}'
    return name


def rust_internal_module_name(file_name: str) -> str:
    """Name of the (crate private) Rust module the messages of the given
    proto file are generated into, e.g. 'foo/bar_baz.proto' ->
    'foo_sbar__baz'.
    """
    stripped = file_name.removesuffix(PROTO_FILE_SUFFIX)
    return stripped.replace('_', '__').replace('/', '_s')
