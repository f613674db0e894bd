"""Text templates rendered by the layout initializer and the bindings emitter."""

from string import Template

# Paths are written out in full because OpenSSL's own `$dir` expansion
# would collide with Template placeholders.
OPENSSL_CONFIG = Template(
    """\
# OpenSSL configuration generated by easycert.

HOME = ${root_dir}

[ ca ]
default_ca = CA_default

[ CA_default ]
dir              = ${root_dir}
certs            = ${root_dir}/certs
crl_dir          = ${root_dir}/crl
new_certs_dir    = ${root_dir}/newcerts
database         = ${root_dir}/index.txt
serial           = ${root_dir}/serial
certificate      = ${root_dir}/certs/ca.crt
private_key      = ${root_dir}/private/ca.key
crl              = ${crl_file}
default_md       = ${digest}
default_days     = 365
default_crl_days = 30
preserve         = no
unique_subject   = no
copy_extensions  = copy
policy           = policy_anything
x509_extensions  = server_cert

[ policy_anything ]
countryName            = optional
stateOrProvinceName    = optional
localityName           = optional
organizationName       = optional
organizationalUnitName = optional
commonName             = supplied
emailAddress           = optional

[ req ]
default_bits       = 2048
default_md         = ${digest}
distinguished_name = req_distinguished_name
req_extensions     = v3_req
x509_extensions    = v3_ca
prompt             = no
string_mask        = utf8only

[ req_distinguished_name ]
commonName = ${host_name}

[ v3_req ]
basicConstraints = CA:FALSE
keyUsage         = nonRepudiation, digitalSignature, keyEncipherment
subjectAltName   = @alt_names

[ v3_ca ]
subjectKeyIdentifier   = hash
authorityKeyIdentifier = keyid:always,issuer
basicConstraints       = critical, CA:true
keyUsage               = critical, cRLSign, keyCertSign

[ server_cert ]
basicConstraints       = CA:FALSE
subjectKeyIdentifier   = hash
authorityKeyIdentifier = keyid,issuer
keyUsage               = critical, digitalSignature, keyEncipherment
extendedKeyUsage       = serverAuth, clientAuth

[ alt_names ]
${alt_names}
"""
)

GO_SERVER = Template(
    """\
// Code generated by easycert; DO NOT EDIT.
//
// System:      ${system}/${arch}
// OpenSSL:     ${version}
// Date:        ${date}
// Valid until: ${valid_until}

package main

import (
	"crypto/tls"
	"crypto/x509"
	"errors"
)

var caCert = []byte(${ca_cert})

var serverCert = []byte(${cert})

var serverKey = []byte(${key})

// ServerTLSConfig returns a configuration serving the embedded certificate
// and requiring client certificates signed by the embedded CA.
func ServerTLSConfig() (*tls.Config, error) {
	cert, err := tls.X509KeyPair(serverCert, serverKey)
	if err != nil {
		return nil, err
	}
	pool := x509.NewCertPool()
	if !pool.AppendCertsFromPEM(caCert) {
		return nil, errors.New("invalid CA certificate")
	}
	return &tls.Config{
		Certificates: []tls.Certificate{cert},
		ClientCAs:    pool,
		ClientAuth:   tls.VerifyClientCertIfGiven,
		MinVersion:   tls.VersionTLS12,
	}, nil
}
"""
)

GO_CLIENT = Template(
    """\
// Code generated by easycert; DO NOT EDIT.
//
// System:      ${system}/${arch}
// OpenSSL:     ${version}
// Date:        ${date}
// Valid until: ${valid_until}

package main

import (
	"crypto/tls"
	"crypto/x509"
	"errors"
)

var caCert = []byte(${ca_cert})

// ClientTLSConfig returns a configuration trusting the embedded CA.
func ClientTLSConfig() (*tls.Config, error) {
	pool := x509.NewCertPool()
	if !pool.AppendCertsFromPEM(caCert) {
		return nil, errors.New("invalid CA certificate")
	}
	return &tls.Config{
		RootCAs:    pool,
		MinVersion: tls.VersionTLS12,
	}, nil
}
"""
)

PYTHON_SERVER = Template(
    '''\
"""TLS material generated by easycert; do not edit.

System:      ${system}/${arch}
OpenSSL:     ${version}
Date:        ${date}
Valid until: ${valid_until}
"""

import os
import ssl
import tempfile

CA_CERT = ${ca_cert}

SERVER_CERT = ${cert}

SERVER_KEY = ${key}


def server_context() -> ssl.SSLContext:
    """Return a context serving the embedded certificate."""
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.load_verify_locations(cadata=CA_CERT.decode("ascii"))
    fd, path = tempfile.mkstemp(suffix=".pem")
    try:
        with os.fdopen(fd, "wb") as chain:
            chain.write(SERVER_CERT + SERVER_KEY)
        context.load_cert_chain(path)
    finally:
        os.remove(path)
    return context
'''
)

PYTHON_CLIENT = Template(
    '''\
"""TLS material generated by easycert; do not edit.

System:      ${system}/${arch}
OpenSSL:     ${version}
Date:        ${date}
Valid until: ${valid_until}
"""

import ssl

CA_CERT = ${ca_cert}


def client_context() -> ssl.SSLContext:
    """Return a context trusting the embedded CA."""
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.load_verify_locations(cadata=CA_CERT.decode("ascii"))
    return context
'''
)
