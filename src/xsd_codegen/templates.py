"""Boilerplate text for generated sources.

All fixed C++ text lives here as :class:`string.Template` data so the emitters
only assemble model-dependent pieces. Templates are written with four-space
indentation relative to column zero; :mod:`xsd_codegen.cpp_writer` re-indents
them into the namespace body.

:func:`render` substitutes strictly: a placeholder without a value in the
mapping fails the render instead of leaking ``$name`` into the output.
"""

from __future__ import annotations

from string import Template
from typing import Dict, Mapping

from .errors import EmitError

CORE_H = "core_h"
CORE_CPP = "core_cpp"
INTEGER_BUILTINS_H = "integer_builtins_h"
INTEGER_BUILTINS_CPP = "integer_builtins_cpp"
INTEGER_TYPE_H = "integer_type_h"
INTEGER_TYPE_CPP = "integer_type_cpp"
DECIMAL_BUILTINS_H = "decimal_builtins_h"
DECIMAL_BUILTINS_CPP = "decimal_builtins_cpp"
DECIMAL_TYPE_H = "decimal_type_h"
DECIMAL_TYPE_CPP = "decimal_type_cpp"

NO_DATA: Dict[str, str] = {}

_CORE_H = """\
${license}

#pragma once

${includes}${namespace_open}
${body}
${namespace_close}
"""

_CORE_CPP = """\
${license}

${includes}${namespace_open}
${body}
${namespace_close}
"""

_INTEGER_BUILTINS_H = """\
using IntType = int;
constexpr const IntType IntMin = std::numeric_limits<IntType>::min();
constexpr const IntType IntMax = std::numeric_limits<IntType>::max();

class IntRange
{
public:
    explicit IntRange( const IntType min, const IntType max, const IntType value );
    virtual ~IntRange() = default;
    IntType getValue() const;
    IntType getMin() const;
    IntType getMax() const;
    void setValue( const IntType value );
    bool parse( const std::string& value );
private:
    IntType myMin;
    IntType myMax;
    IntType myValue;
};

std::string toString( const IntRange& value );
std::ostream& toStream( std::ostream& os, const IntRange& value );
std::ostream& operator<<( std::ostream& os, const IntRange& value );"""

_INTEGER_BUILTINS_CPP = """\
IntRange::IntRange( const IntType min, const IntType max, const IntType value )
:myMin( min )
,myMax( max )
,myValue( value )
{
    setValue( value );
}

IntType IntRange::getValue() const
{
    return myValue;
}

IntType IntRange::getMin() const
{
    return myMin;
}

IntType IntRange::getMax() const
{
    return myMax;
}

void IntRange::setValue( const IntType value )
{
    if ( value < myMin )
    {
        myValue = myMin;
    }
    else if ( value > myMax )
    {
        myValue = myMax;
    }
    else
    {
        myValue = value;
    }
}

bool IntRange::parse( const std::string& value )
{
    std::stringstream ss( value );
    IntType temp = 0;
    if ( ( ss >> temp ).fail() )
    {
        return false;
    }
    setValue( temp );
    return true;
}

std::string toString( const IntRange& value )
{
    std::stringstream ss;
    toStream( ss, value );
    return ss.str();
}

std::ostream& toStream( std::ostream& os, const IntRange& value )
{
    return os << value.getValue();
}

std::ostream& operator<<( std::ostream& os, const IntRange& value )
{
    return toStream( os, value );
}"""

_INTEGER_TYPE_H = """\
${documentation}
class ${classname} : public IntRange
{
public:
    explicit ${classname}( const IntType value );
    ${classname}();
    explicit ${classname}( const std::string& value );
};"""

_INTEGER_TYPE_CPP = """\
${classname}::${classname}( const IntType value )
:IntRange( ${min_val}, ${max_val}, value )
{

}

${classname}::${classname}()
:IntRange( ${min_val}, ${max_val}, 0 )
{

}

${classname}::${classname}( const std::string& value )
:IntRange( ${min_val}, ${max_val}, 0 )
{
    parse( value );
}"""

_DECIMAL_BUILTINS_H = """\
using DecimalType = long double;

class DecimalRange
{
public:
    using Clamp = std::function<DecimalType( DecimalType )>;
    explicit DecimalRange( Clamp min, Clamp max, const DecimalType value );
    virtual ~DecimalRange() = default;
    DecimalType getValue() const;
    void setValue( const DecimalType value );
    bool parse( const std::string& value );
private:
    Clamp myMin;
    Clamp myMax;
    DecimalType myValue;
};

std::string toString( const DecimalRange& value );
std::ostream& toStream( std::ostream& os, const DecimalRange& value );
std::ostream& operator<<( std::ostream& os, const DecimalRange& value );"""

_DECIMAL_BUILTINS_CPP = """\
#define MXMININ( bound ) []( DecimalType v ) -> DecimalType { return v < ( bound ) ? ( bound ) : v; }
#define MXMINEX( bound ) []( DecimalType v ) -> DecimalType { return v <= ( bound ) ? std::nextafter( static_cast<DecimalType>( bound ), std::numeric_limits<DecimalType>::max() ) : v; }
#define MXMAXIN( bound ) []( DecimalType v ) -> DecimalType { return v > ( bound ) ? ( bound ) : v; }
#define MXMAXEX( bound ) []( DecimalType v ) -> DecimalType { return v >= ( bound ) ? std::nextafter( static_cast<DecimalType>( bound ), std::numeric_limits<DecimalType>::lowest() ) : v; }
#define MX_NOOP []( DecimalType v ) -> DecimalType { return v; }

DecimalRange::DecimalRange( Clamp min, Clamp max, const DecimalType value )
:myMin( min )
,myMax( max )
,myValue( value )
{
    setValue( value );
}

DecimalType DecimalRange::getValue() const
{
    return myValue;
}

void DecimalRange::setValue( const DecimalType value )
{
    myValue = myMax( myMin( value ) );
}

bool DecimalRange::parse( const std::string& value )
{
    std::stringstream ss( value );
    DecimalType temp = 0.0;
    if ( ( ss >> temp ).fail() )
    {
        return false;
    }
    setValue( temp );
    return true;
}

std::string toString( const DecimalRange& value )
{
    std::stringstream ss;
    toStream( ss, value );
    return ss.str();
}

std::ostream& toStream( std::ostream& os, const DecimalRange& value )
{
    return os << value.getValue();
}

std::ostream& operator<<( std::ostream& os, const DecimalRange& value )
{
    return toStream( os, value );
}"""

_DECIMAL_TYPE_H = """\
${documentation}
class ${classname} : public DecimalRange
{
public:
    explicit ${classname}( const DecimalType value );
    ${classname}();
    explicit ${classname}( const std::string& value );
};"""

_DECIMAL_TYPE_CPP = """\
${classname}::${classname}( const DecimalType value )
:DecimalRange( ${minexpr}, ${maxexpr}, value )
{

}

${classname}::${classname}()
:DecimalRange( ${minexpr}, ${maxexpr}, ${defaultval} )
{

}

${classname}::${classname}( const std::string& value )
:DecimalRange( ${minexpr}, ${maxexpr}, ${defaultval} )
{
    parse( value );
}"""

TEMPLATES: Dict[str, Template] = {
    CORE_H: Template(_CORE_H),
    CORE_CPP: Template(_CORE_CPP),
    INTEGER_BUILTINS_H: Template(_INTEGER_BUILTINS_H),
    INTEGER_BUILTINS_CPP: Template(_INTEGER_BUILTINS_CPP),
    INTEGER_TYPE_H: Template(_INTEGER_TYPE_H),
    INTEGER_TYPE_CPP: Template(_INTEGER_TYPE_CPP),
    DECIMAL_BUILTINS_H: Template(_DECIMAL_BUILTINS_H),
    DECIMAL_BUILTINS_CPP: Template(_DECIMAL_BUILTINS_CPP),
    DECIMAL_TYPE_H: Template(_DECIMAL_TYPE_H),
    DECIMAL_TYPE_CPP: Template(_DECIMAL_TYPE_CPP),
}


def render(template_id: str, mapping: Mapping[str, str] = NO_DATA) -> str:
    """Render a registered template.

    Raises:
        EmitError: Unknown template id or a placeholder missing from ``mapping``.
    """
    template = TEMPLATES.get(template_id)
    if template is None:
        raise EmitError(f"unknown template '{template_id}'")
    try:
        return template.substitute(mapping)
    except KeyError as e:
        raise EmitError(f"template '{template_id}' is missing a value for {e}") from None
    except ValueError as e:
        raise EmitError(f"template '{template_id}' is malformed: {e}") from None
