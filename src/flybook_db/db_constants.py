"""Table and column name constants.

Generated by flybook-db-generate. Do not edit.
"""

FILENAME = "flybook.db"

TBLPREFIX = ""
COLPREFIX = "c_"

TABLE_USERS                              = TBLPREFIX + "Users"
TABLE_FLIGHTENTRIES                      = TBLPREFIX + "FlightEntries"
TABLE_AIRPORTS                           = TBLPREFIX + "Airports"
TABLE_AIRCRAFTS                          = TBLPREFIX + "Aircrafts"

USERS_USERNAME                           = COLPREFIX + "username"
USERS_PASSWD                             = COLPREFIX + "passwd"
USERS_PASSWD_SALT                        = COLPREFIX + "passwd_salt"
USERS_FIRSTNAME                          = COLPREFIX + "firstname"
USERS_LASTNAME                           = COLPREFIX + "lastname"
USERS_ROLE                               = COLPREFIX + "role"
USERS_EMAIL                              = COLPREFIX + "email"
USERS_OPTLOCK                            = COLPREFIX + "optlock"

FLIGHTENTRIES_FLIGHT_ID                  = COLPREFIX + "flight_id"
FLIGHTENTRIES_USERNAME                   = COLPREFIX + "username"
FLIGHTENTRIES_DATE                       = COLPREFIX + "date"
FLIGHTENTRIES_AIRCRAFT                   = COLPREFIX + "aircraft"
FLIGHTENTRIES_DEPARTURE_TIME             = COLPREFIX + "departure_time"
FLIGHTENTRIES_DEPARTURE_AIRPORT          = COLPREFIX + "departure_airport"
FLIGHTENTRIES_LANDING_TIME               = COLPREFIX + "landing_time"
FLIGHTENTRIES_LANDING_AIRPORT            = COLPREFIX + "landing_airport"
FLIGHTENTRIES_ONBLOCK_TIME               = COLPREFIX + "onblock_time"
FLIGHTENTRIES_OFFBLOCK_TIME              = COLPREFIX + "offblock_time"
FLIGHTENTRIES_FLIGHT_TYPE                = COLPREFIX + "flight_type"
FLIGHTENTRIES_IFR_TIME                   = COLPREFIX + "ifr_time"
FLIGHTENTRIES_NOTES                      = COLPREFIX + "notes"
FLIGHTENTRIES_OPTLOCK                    = COLPREFIX + "optlock"

AIRPORTS_ID                              = COLPREFIX + "id"
AIRPORTS_CODE                            = COLPREFIX + "code"
AIRPORTS_COUNTRY                         = COLPREFIX + "country"
AIRPORTS_CITY                            = COLPREFIX + "city"
AIRPORTS_NAME                            = COLPREFIX + "name"
AIRPORTS_LOCATION                        = COLPREFIX + "location"
AIRPORTS_OPTLOCK                         = COLPREFIX + "optlock"

AIRCRAFTS_REGISTER                       = COLPREFIX + "register"
AIRCRAFTS_CLASS                          = COLPREFIX + "class"
AIRCRAFTS_CAPACITY                       = COLPREFIX + "capacity"
AIRCRAFTS_WEIGHT                         = COLPREFIX + "weight"
AIRCRAFTS_OPTLOCK                        = COLPREFIX + "optlock"
