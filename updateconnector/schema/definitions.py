"""
Built-in type definitions.

Field and object names are the ones used by the remote Update Connectors;
aliases are the human-readable names accepted on input. Conditional parts
of the KnContact/KnPerson/KnOrganisation/FbSalesLines definitions (which
depend on parent type, action or element values) live in
updateconnector.types.
"""

ADDRESS_REFERENCES = {
    "KnBasicAddressAdr": {
        "type": "KnBasicAddress",
        "alias": "address",
    },
    "KnBasicAddressPad": {
        "type": "KnBasicAddress",
        "alias": "postal_address",
    },
}

DEFINITIONS = {
    "KnSubject": {
        "id_property": "SbId",
        "objects": {
            "KnSubjectLink": {"alias": "subject_link"},
            "KnS01": {"alias": "subject_link_1"},
            "KnS02": {"alias": "subject_link_2"},
        },
        "fields": {
            # Subject type
            "StId": {"alias": "type", "type": "integer", "required": True},
            # Subject
            "Ds": {"alias": "description"},
            # Explanation
            "SbTx": {"alias": "comment"},
            # Date sent
            "Da": {"alias": "date", "type": "date"},
            # Responsible employee
            "EmId": {"alias": "responsible"},
            # Cause (another subject)
            "SbHi": {"type": "integer"},
            "SaId": {"alias": "action_type"},
            "ViPr": {},
            "ScId": {"alias": "source"},
            "DtFr": {"alias": "start_date", "type": "date"},
            "DtTo": {"alias": "end_date", "type": "date"},
            # Done
            "St": {"alias": "done", "type": "boolean"},
            "DtSt": {"alias": "done_date", "type": "date"},
            "FvF1": {"type": "integer"},
            "FvF2": {"type": "integer"},
            "FvF3": {"type": "integer"},
            "SbBl": {"alias": "blocked", "type": "boolean"},
            "SbPa": {"alias": "attachment"},
            # Save file with subject
            "FileTrans": {"type": "boolean"},
            # File as byte array
            "FileStream": {},
        },
    },
    "KnSubjectLink": {
        "id_property": "SbId",
        "fields": {
            # Save in CRM subject
            "DoCRM": {"type": "boolean"},
            "ToBC": {"alias": "is_org_person", "type": "boolean"},
            "ToEm": {"alias": "is_employee", "type": "boolean"},
            "ToSR": {"alias": "is_sales_relation", "type": "boolean"},
            "ToPR": {"alias": "is_purchase_relation", "type": "boolean"},
            "ToCl": {"alias": "is_client_ib", "type": "boolean"},
            "ToCV": {"alias": "is_client_vpb", "type": "boolean"},
            "ToEr": {"alias": "is_employer", "type": "boolean"},
            "ToAp": {"alias": "is_applicant", "type": "boolean"},
            # Destination type; 1 none, 2 employee, 3 org/person, 4 sales relation...
            "SfTp": {"alias": "destination_type", "type": "integer"},
            "SfId": {"alias": "destination_id"},
            "BcId": {"alias": "org_person"},
            "CdId": {"alias": "contact", "type": "integer"},
            "SiUn": {"type": "integer"},
            "SiTp": {"alias": "sales_invoice_type", "type": "integer"},
            "SiId": {"alias": "sales_invoice"},
            "PiUn": {"type": "integer"},
            "PiTp": {"alias": "purchase_invoice_type", "type": "integer"},
            "PiId": {"alias": "purchase_invoice"},
            "FiYe": {"alias": "fiscal_year", "type": "integer"},
            "PjId": {"alias": "project"},
            "CaId": {"alias": "campaign", "type": "integer"},
            "SjId": {"type": "integer"},
            "SuNr": {"alias": "subscription", "type": "integer"},
            "VaIt": {"alias": "item_type"},
            "BiId": {"alias": "item_code"},
        },
    },
    # Free fields; these may differ per environment.
    "KnS01": {
        "id_property": "SbId",
        "fields": {
            "U001": {"alias": "end_date", "type": "date"},
            "U002": {"alias": "id_number"},
        },
    },
    "KnS02": {
        "id_property": "SbId",
        "fields": {
            "U001": {"alias": "contract_number"},
            "U002": {"alias": "start_date", "type": "date"},
            "U003": {"alias": "end_date", "type": "date"},
            "U004": {"alias": "value", "type": "decimal"},
            "U005": {"alias": "ended", "type": "boolean"},
            "U006": {"alias": "recurring", "type": "boolean"},
            "U007": {"alias": "cancel_term"},
        },
    },
    "KnBasicAddress": {
        "iso_country_fields": {"country_iso": "CoId"},
        "fields": {
            # Country code (not ISO)
            "CoId": {"alias": "country"},
            # ISO country code, converted to CoId
            "country_iso": {},
            "PbAd": {"alias": "is_po_box", "type": "boolean", "required": True, "default": False},
            # Addition to address
            "StAd": {},
            "Ad": {"alias": "street", "required": True},
            "HmNr": {"alias": "house_number", "type": "integer"},
            "HmAd": {"alias": "house_number_ext"},
            "ZpCd": {"alias": "zip_code", "required": True},
            "Rs": {"alias": "town", "required": True},
            # Foreign address
            "AdAd": {},
            # Must not be set on insert; see types.address.
            "BeginDate": {"type": "date"},
            # Look up address using zip code and house number
            "ResZip": {"alias": "resolve_zip", "type": "boolean", "default": False},
        },
    },
    "KnContact": {
        "objects": dict(ADDRESS_REFERENCES),
        "fields": {
            "BcCoOga": {"alias": "organisation_code"},
            "BcCoPer": {"alias": "person_code"},
            "PadAdr": {"alias": "postal_address_is_address", "type": "boolean"},
            # Address line
            "ExAd": {},
            # Function
            "ViFu": {},
            "FuDs": {"alias": "job_title"},
            # Correspondence
            "Corr": {"type": "boolean"},
            # Preferred medium
            "ViMd": {},
            "TeNr": {"alias": "phone"},
            "FaNr": {"alias": "fax"},
            "MbNr": {"alias": "mobile"},
            "EmAd": {"alias": "email"},
            "HoPa": {"alias": "homepage"},
            "Re": {"alias": "comment"},
            "Bl": {"alias": "blocked", "type": "boolean"},
            "AtLn": {},
            "LeHe": {},
            "SocN": {},
            "Face": {"alias": "facebook"},
            "Link": {"alias": "linkedin"},
            "Twtr": {"alias": "twitter"},
            "AddToPortal": {"type": "boolean"},
            "EmailPortal": {},
        },
    },
    "KnPerson": {
        "iso_country_fields": {"birth_country_iso": "CoBi"},
        "objects": {
            **ADDRESS_REFERENCES,
            "KnContact": {"alias": "contact"},
        },
        "fields": {
            # Assign a new number automatically
            "AutoNum": {"alias": "auto_num", "type": "boolean"},
            # How to find an existing person; default depends on action.
            "MatchPer": {"alias": "match_method"},
            "BcCo": {"alias": "code"},
            "SeNm": {"alias": "search_name"},
            # Name used in salutation
            "CaNm": {"alias": "name"},
            "FiNm": {"alias": "first_name", "required": True},
            "In": {"alias": "initials"},
            # Prefix, e.g. 'van'
            "Is": {"alias": "prefix"},
            "LaNm": {"alias": "last_name", "required": True},
            # Birth name separately
            "SpNm": {"type": "boolean", "default": False},
            "IsBi": {},
            "NmBi": {},
            "IsPa": {},
            "NmPa": {},
            # Name usage
            "ViUs": {},
            # Gender: M, V, O (unknown)
            "ViGe": {"alias": "gender", "default": "O"},
            # Nationality
            "PsNa": {},
            "DaBi": {"alias": "birth_date", "type": "date"},
            # Country of birth
            "CoBi": {},
            "birth_country_iso": {},
            "RsBi": {"alias": "birth_place"},
            # Social security number
            "SoSe": {"alias": "bsn"},
            "ViCs": {},
            "DaMa": {"type": "date"},
            "DaDi": {"type": "date"},
            "DaDe": {"type": "date"},
            "TtId": {},
            "TtEx": {},
            "LeHe": {},
            "PadAdr": {"alias": "postal_address_is_address", "type": "boolean"},
            "TeNr": {"alias": "phone"},
            "TeN2": {},
            "FaNr": {"alias": "fax"},
            "MbNr": {"alias": "mobile"},
            "MbN2": {},
            "EmAd": {"alias": "email"},
            "EmA2": {},
            "HoPa": {"alias": "homepage"},
            "Corr": {"type": "boolean", "default": False},
            "ViMd": {},
            "Re": {"alias": "comment"},
            "StId": {},
            "SocN": {},
            "Face": {"alias": "facebook"},
            "Link": {"alias": "linkedin"},
            "Twtr": {"alias": "twitter"},
            "FileName": {},
            "FileStream": {},
            "AddToPortal": {"type": "boolean"},
            "EmailPortal": {},
        },
    },
    "KnOrganisation": {
        "objects": {
            **ADDRESS_REFERENCES,
            "KnContact": {"alias": "contact"},
        },
        "fields": {
            "AutoNum": {"alias": "auto_num", "type": "boolean"},
            "MatchOga": {"alias": "match_method"},
            "BcCo": {"alias": "code"},
            "SeNm": {"alias": "search_name"},
            "Nm": {"alias": "name"},
            # Legal form
            "ViLe": {"alias": "org_type"},
            "ViLb": {"alias": "branche"},
            # Chamber of commerce number and date
            "CcNr": {"alias": "coc_number"},
            "CcDa": {"type": "date"},
            "NmRg": {},
            "RsRg": {},
            "TtId": {},
            "LeHe": {},
            "OuId": {},
            "PbAd": {"alias": "postal_address_is_address", "type": "boolean"},
            "TeNr": {"alias": "phone"},
            "FaNr": {"alias": "fax"},
            "MbNr": {"alias": "mobile"},
            "EmAd": {"alias": "email"},
            "HoPa": {"alias": "homepage"},
            "Corr": {"type": "boolean"},
            "ViMd": {},
            "Re": {"alias": "comment"},
            "FiNr": {"alias": "fiscal_number"},
            "StId": {},
            "SocN": {},
            "Face": {"alias": "facebook"},
            "Link": {"alias": "linkedin"},
            "Twtr": {"alias": "twitter"},
            "BcPa": {},
        },
    },
    "FbSales": {
        "iso_country_fields": {"dest_country_iso": "CoId"},
        "objects": {
            "FbSalesLines": {"alias": "line_items", "multiple": True},
        },
        "fields": {
            # Order number
            "OrNu": {},
            "OrDa": {"alias": "date", "type": "date"},
            "DbId": {"alias": "sales_relation"},
            "DaDe": {"alias": "delivery_date_req", "type": "date"},
            "DaPr": {"alias": "delivery_date_ack", "type": "date"},
            "CuId": {"alias": "currency_code"},
            "Rate": {"alias": "currency_rate"},
            # Backorder
            "BkOr": {"type": "boolean"},
            "SaCh": {"alias": "sales_channel"},
            "VaDu": {"alias": "vat_due"},
            "InVa": {"alias": "includes_vat"},
            "PaCd": {},
            "PaTp": {"alias": "payment_type"},
            "Re": {"alias": "comment"},
            "Unit": {"alias": "unit", "type": "integer"},
            "War": {"alias": "warehouse"},
            "DlPr": {"alias": "delivery_prio", "type": "integer"},
            "LgId": {"alias": "language"},
            "DeCo": {"alias": "delivery_cond"},
            # Destination country (not ISO)
            "CoId": {"alias": "dest_country_afas"},
            "dest_country_iso": {},
            "InPc": {"type": "decimal"},
            "JoCo": {"alias": "journal"},
            "FaTo": {"alias": "invoice_to"},
            "FuOr": {"alias": "future_order", "type": "boolean"},
            "DtId": {"alias": "delivery_type", "type": "integer"},
            "PrId": {"alias": "project"},
            "SeWe": {"alias": "weight", "type": "decimal"},
            "OrPr": {"alias": "order_processing"},
            "AmDp": {"type": "decimal"},
            # Delivery address
            "DlAd": {"type": "integer"},
        },
    },
    "FbSalesLines": {
        "objects": {
            "FbOrderBatchLines": {"alias": "batch_line_items", "multiple": True},
            "FbOrderSerialLines": {"alias": "serial_line_items", "multiple": True},
        },
        "fields": {
            # Item type; 1 work type, 2 article, 3 text, 4 subtotal, 7 composition...
            "VaIt": {"alias": "item_type", "type": "integer", "default": 2},
            "ItCd": {"alias": "item_code"},
            "Ds": {"alias": "description"},
            "VaRc": {"alias": "vat_type"},
            "BiUn": {"alias": "unit_type"},
            "QuUn": {"alias": "quantity", "type": "decimal"},
            "QuLe": {"alias": "length", "type": "decimal"},
            "QuWi": {"alias": "width", "type": "decimal"},
            "QuHe": {"alias": "height", "type": "decimal"},
            "Qu": {"alias": "quantity_ordered", "type": "decimal"},
            "QuDl": {"alias": "quantity_deliver", "type": "decimal"},
            "PrLi": {"alias": "price_list"},
            "War": {"alias": "warehouse"},
            "EUSe": {"type": "boolean"},
            "VaWt": {"alias": "weight_unit"},
            "NeWe": {"alias": "weight_net", "type": "decimal"},
            "GrWe": {"alias": "weight_gross", "type": "decimal"},
            "Upri": {"alias": "unit_price", "type": "decimal"},
            "CoPr": {"alias": "cost_price", "type": "decimal"},
            "PRDc": {"alias": "discount_perc", "type": "decimal"},
            "Re": {"alias": "comment"},
            "GuLi": {"alias": "guid"},
            "DiDe": {"alias": "direct_delivery", "type": "boolean"},
        },
    },
    "FbOrderBatchLines": {
        "fields": {
            "BaNu": {"alias": "batch_number"},
            "BiUn": {"alias": "unit_type"},
            "QuUn": {"alias": "quantity_units", "type": "decimal"},
            "Qu": {"alias": "quantity", "type": "decimal"},
            "QuIn": {"alias": "quantity_invoice", "type": "decimal"},
            "Re": {"alias": "comment"},
        },
    },
    "FbOrderSerialLines": {
        "fields": {
            "SeNu": {"alias": "serial_number"},
            "BiUn": {"alias": "unit_type"},
            "QuUn": {"alias": "quantity_units", "type": "decimal"},
            "Qu": {"alias": "quantity", "type": "decimal"},
            "QuIn": {"alias": "quantity_invoice", "type": "decimal"},
            "Re": {"alias": "comment"},
        },
    },
}
